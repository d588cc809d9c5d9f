from pathlib import Path
from typing import *

import matplotlib.pyplot as plt
import pandas
from loguru import logger
from statsmodels.sandbox.stats.multicomp import TukeyHSDResults

import projectoutput
from analysis import anovacalc, fitness, strainstats
from analysis.strainstats import StatisticalTestError, StatisticResult
from graphics import CorrelationPlot, StrainFitnessPlot
from projectpaths import Filenames
from validation import ValidateTable

pandas.set_option('mode.chained_assignment', None)


class AnalysisResults:
	""" Holds every table generated during a single run."""

	def __init__(self):
		self.competition_table: Optional[pandas.DataFrame] = None
		self.mic_table: Optional[pandas.DataFrame] = None
		self.fitness_table: Optional[pandas.DataFrame] = None
		self.normalized_table: Optional[pandas.DataFrame] = None
		self.summary_table: Optional[pandas.DataFrame] = None
		self.combined_table: Optional[pandas.DataFrame] = None

		self.regression: Any = None
		self.anova_table: Optional[pandas.DataFrame] = None
		self.pooled_variance: Optional[float] = None
		self.tukey: Optional[TukeyHSDResults] = None
		self.letters: Optional[Dict[str, str]] = None

		# Maps the correlated column to the correlation with mean fitness.
		self.correlations: Dict[str, StatisticResult] = dict()
		self.results: List[StatisticResult] = list()
		# Maps the name of each test which could not be performed to the reason why.
		self.omitted: Dict[str, str] = dict()
		self.report: str = ""


class FitnessCostAnalysis:
	def __init__(self, reference_strains: Optional[List[str]] = None, multiple_mutations: Optional[List[str]] = None,
			pooled_variance: Optional[float] = None, alpha: float = 0.05, antibiotic: Optional[str] = None):
		"""
		Parameters
		----------
		reference_strains: Optional[List[str]]
			The strains used as the denominator when normalizing each (block, paired_ID) pair. Defaults to the strain
			matching the `background` of the pair.
		multiple_mutations: Optional[List[str]]
			Strains carrying more than one resistance mutation. Compared against the remaining strains with a two-sample t-test.
		pooled_variance: Optional[float]
			Overrides the residual mean square of the ANOVA when calculating confidence intervals.
		alpha: float
			The family-wise error rate for the tukey test.
		antibiotic: Optional[str]
			Only analyze competitions performed with this antibiotic.
		"""
		self.reference_strains = reference_strains
		self.multiple_mutations = multiple_mutations
		self.pooled_variance = pooled_variance
		self.alpha = alpha
		self.column = 'log_relative_fitness'

		self.validator = ValidateTable(antibiotic)
		self.correlation_plotter = CorrelationPlot()
		self.fitness_plotter = StrainFitnessPlot()

	@staticmethod
	def _run_test(results: AnalysisResults, name: str, function: Callable[..., StatisticResult], *args, **kwargs) -> Optional[StatisticResult]:
		""" Runs a single statistical test. Failed tests are reported as omitted rather than stopping the other tests."""
		try:
			result = function(*args, name = name, **kwargs)
		except StatisticalTestError as exception:
			logger.error(f"Could not run '{name}': {exception}")
			results.omitted[name] = str(exception)
			return None
		results.results.append(result)
		return result

	def load(self, competition: Union[Path, pandas.DataFrame], mic: Union[Path, pandas.DataFrame], results: AnalysisResults) -> AnalysisResults:
		logger.info("Loading tables...")
		results.competition_table = self.validator.load_competition_table(competition)
		results.mic_table = self.validator.load_mic_table(mic)
		return results

	def calculate_fitness(self, results: AnalysisResults) -> AnalysisResults:
		logger.info("Calculating relative fitness...")
		results.fitness_table = fitness.calculate_malthusian_fitness(results.competition_table)
		normalized_table = fitness.normalize_against_common_competitor(results.fitness_table, self.reference_strains)
		results.normalized_table = fitness.drop_undefined(normalized_table, self.column)
		logger.info(f"Calculated {len(results.normalized_table)} normalized fitness values for {results.normalized_table['strain'].nunique()} strains.")
		return results

	def run_anova(self, results: AnalysisResults) -> AnalysisResults:
		logger.info("Running ANOVA...")
		table = results.normalized_table
		try:
			results.regression, results.anova_table = anovacalc.oneway_anova(table, self.column)
		except StatisticalTestError as exception:
			logger.error(f"Could not run the ANOVA: {exception}")
			results.omitted['one-way ANOVA'] = str(exception)
			results.pooled_variance = self.pooled_variance
			return results

		if self.pooled_variance is None:
			results.pooled_variance = anovacalc.pooled_variance(results.anova_table)
		else:
			logger.info(f"Using the given pooled variance ({self.pooled_variance}) rather than the ANOVA residual mean square.")
			results.pooled_variance = self.pooled_variance
		logger.info(f"Pooled variance: {results.pooled_variance:.5f}")

		logger.info("Running tukey...")
		results.tukey = anovacalc.tukeyhsd(table, self.column, alpha = self.alpha)
		results.letters = anovacalc.tukey_letters(table, results.tukey, self.column)
		return results

	def summarize(self, results: AnalysisResults) -> AnalysisResults:
		summary = strainstats.summarize(results.normalized_table, self.column)
		if results.pooled_variance is not None:
			summary = strainstats.confidence_interval(summary, results.pooled_variance)
		else:
			logger.warning("No pooled variance is available, so the confidence intervals were not calculated.")
		results.summary_table = summary
		results.combined_table = strainstats.merge_with_mic(summary, results.mic_table, results.letters)
		return results

	def run_tests(self, results: AnalysisResults) -> AnalysisResults:
		logger.info("Running t-tests and correlations...")
		table = results.normalized_table
		self._run_test(results, "one-sample t-test (all strains)", strainstats.one_sample_ttest, table[self.column], mu = 0, alternative = 'less')
		for strain, group in table.groupby(by = 'strain'):
			self._run_test(results, f"one-sample t-test ({strain})", strainstats.one_sample_ttest, group[self.column], mu = 0, alternative = 'less')

		combined = results.combined_table
		for column, label in [('log2_mic_daughter', 'MIC'), ('fold_change', 'fold change in MIC')]:
			result = self._run_test(
				results, f"pearson correlation (fitness vs {label})", strainstats.pearson_correlation,
				combined['mean'], combined[column], alternative = 'two-sided'
			)
			if result is not None:
				results.correlations[column] = result

		name = "two-sample t-test (single vs multiple mutations)"
		if self.multiple_mutations:
			single, multiple = strainstats.partition_by_mutation(combined, self.multiple_mutations)
			self._run_test(results, name, strainstats.two_sample_ttest, single, multiple, alternative = 'greater', equal_var = True)
		else:
			logger.warning(f"No multiple-mutation strains were given, so the '{name}' was not run.")
			results.omitted[name] = "no multiple-mutation strains were given"
		return results

	def save(self, results: AnalysisResults, folder: Path):
		filenames = Filenames(folder)
		logger.info("Saving tables...")
		projectoutput.save_table(results.fitness_table, filenames.filename_table_fitness)
		projectoutput.save_table(results.normalized_table, filenames.filename_table_normalized)
		projectoutput.save_table(results.summary_table, filenames.filename_table_summary)
		projectoutput.save_table(results.combined_table, filenames.filename_table_combined)
		projectoutput.save_statistics(results.results, filenames.filename_table_statistics)
		if results.anova_table is not None:
			projectoutput.save_anova(results.anova_table, filenames.filename_table_anova)
			projectoutput.save_regression(results.regression, filenames.filename_table_regression_model)
			projectoutput.save_table_tukey(results.tukey, filenames.filename_table_tukey, filenames.filename_data_tukey)
			projectoutput.plot_qq(results.regression, filenames.filename_figure_qq)
		projectoutput.save_report(results.report, filenames.filename_report)

		logger.info("Saving figures...")
		correlations = {key: (value.statistic, value.pvalue) for key, value in results.correlations.items()}
		figure = self.correlation_plotter.plot(results.combined_table, correlations, filename = filenames.filename_figure_correlation)
		plt.close(figure)
		if 'half_width' in results.combined_table.columns:
			ax = self.fitness_plotter.plot(results.combined_table, filename = filenames.filename_figure_fitness)
			plt.close(ax.figure)
		else:
			logger.warning("Skipping the strain fitness figure since the confidence intervals are not available.")

	def run(self, competition: Union[Path, pandas.DataFrame], mic: Union[Path, pandas.DataFrame], project_folder: Optional[Path] = None) -> AnalysisResults:
		results = AnalysisResults()
		results = self.load(competition, mic, results)
		results = self.calculate_fitness(results)
		results = self.run_anova(results)
		results = self.summarize(results)
		results = self.run_tests(results)

		results.report = projectoutput.format_report(results.combined_table, results.anova_table, results.pooled_variance, results.results,
			results.omitted)
		for line in results.report.split('\n'):
			logger.info(line)

		if project_folder is not None:
			self.save(results, project_folder)
		return results
