from .strainstats import StatisticalTestError, StatisticResult
from .anovacalc import oneway_anova, tukeyhsd
from .workflow import AnalysisResults, FitnessCostAnalysis
