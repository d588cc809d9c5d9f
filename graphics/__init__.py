from .correlationplot import CorrelationPlot, save_figure
from .fitnessplot import StrainFitnessPlot
