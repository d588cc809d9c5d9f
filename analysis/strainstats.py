import math
from typing import *

import numpy
import pandas
from loguru import logger
from scipy import stats

from analysis import equations

ALTERNATIVES = {
	'two.sided': 'two-sided',
	'two-sided': 'two-sided',
	'less':      'less',
	'greater':   'greater'
}


class StatisticalTestError(ValueError):
	""" Raised when a statistical test cannot be performed on the given data."""
	pass


class StatisticResult(NamedTuple):
	name: str
	statistic: float
	pvalue: float
	df: Optional[float] = None
	alternative: str = 'two-sided'
	confidence_interval: Optional[Tuple[float, float]] = None

	def to_dict(self) -> Dict[str, Any]:
		lower, upper = self.confidence_interval if self.confidence_interval else (math.nan, math.nan)
		return {
			'name':        self.name,
			'statistic':   self.statistic,
			'pvalue':      self.pvalue,
			'df':          self.df,
			'alternative': self.alternative,
			'lower':       lower,
			'upper':       upper
		}


def _get_alternative(alternative: str) -> str:
	""" Accepts both the 'two.sided' and 'two-sided' spellings."""
	try:
		return ALTERNATIVES[alternative]
	except KeyError:
		message = f"Invalid alternative hypothesis '{alternative}'. Expected one of {sorted(ALTERNATIVES)}"
		raise ValueError(message)


def _check_sample(values: Sequence[float], label: str, minimum: int = 2) -> numpy.ndarray:
	values = numpy.asarray(values, dtype = float)
	values = values[~numpy.isnan(values)]
	if len(values) < minimum:
		message = f"The sample '{label}' has {len(values)} values, but at least {minimum} are required."
		raise StatisticalTestError(message)
	return values


def summarize(table: pandas.DataFrame, column: str = 'log_relative_fitness') -> pandas.DataFrame:
	""" Calculates the mean, replicate count, and standard deviation of `column` for each strain."""
	groups = table.groupby(by = 'strain')[column]
	summary = pandas.DataFrame({
		'mean': groups.mean(),
		'n':    groups.count(),
		'std':  groups.std()
	})
	summary.index.name = 'strain'
	return summary.reset_index()


def confidence_interval(summary: pandas.DataFrame, pooled_variance: float, confidence: float = 0.95) -> pandas.DataFrame:
	"""
		Adds the confidence interval of the mean fitness of each strain.
	Parameters
	----------
	summary: pandas.DataFrame
		The output of `summarize()`.
	pooled_variance: float
		The residual mean square of the one-way ANOVA. The same value is used for every strain.
	confidence: float
	"""
	summary = summary.copy()
	single_replicates = summary[summary['n'] < 2]
	for strain in single_replicates['strain']:
		logger.warning(f"Strain '{strain}' has a single replicate, so a confidence interval cannot be calculated.")

	summary['half_width'] = [equations.confidence_half_width(n, pooled_variance, confidence) for n in summary['n']]
	summary['lower'] = summary['mean'] - summary['half_width']
	summary['upper'] = summary['mean'] + summary['half_width']
	return summary


def one_sample_ttest(values: Sequence[float], mu: float = 0, alternative: str = 'less', name: str = 'one-sample t-test') -> StatisticResult:
	""" Tests whether the mean of `values` differs from `mu`. The default tests whether resistance is costly (mean < 0)."""
	alternative = _get_alternative(alternative)
	values = _check_sample(values, name)
	result = stats.ttest_1samp(values, mu, alternative = alternative)
	interval = result.confidence_interval(0.95)
	return StatisticResult(name, float(result.statistic), float(result.pvalue), float(result.df), alternative, (float(interval.low), float(interval.high)))


def two_sample_ttest(group_a: Sequence[float], group_b: Sequence[float], alternative: str = 'greater', equal_var: bool = True,
		name: str = 'two-sample t-test') -> StatisticResult:
	""" Student's t-test with a pooled variance unless `equal_var` is False (Welch)."""
	alternative = _get_alternative(alternative)
	group_a = _check_sample(group_a, f"{name} (a)")
	group_b = _check_sample(group_b, f"{name} (b)")
	result = stats.ttest_ind(group_a, group_b, equal_var = equal_var, alternative = alternative)
	interval = result.confidence_interval(0.95)
	return StatisticResult(name, float(result.statistic), float(result.pvalue), float(result.df), alternative, (float(interval.low), float(interval.high)))


def pearson_correlation(x: Sequence[float], y: Sequence[float], alternative: str = 'two-sided', name: str = 'pearson correlation') -> StatisticResult:
	""" The `statistic` of the returned result is Pearson's r."""
	alternative = _get_alternative(alternative)
	x = numpy.asarray(x, dtype = float)
	y = numpy.asarray(y, dtype = float)
	if len(x) != len(y):
		message = f"Cannot correlate samples of different lengths ({len(x)} and {len(y)})"
		raise StatisticalTestError(message)
	# Missing MIC values and log2(0) show up as NaN and -inf.
	finite = numpy.isfinite(x) & numpy.isfinite(y)
	if not finite.all():
		logger.warning(f"Removing {(~finite).sum()} points with an undefined value from '{name}'.")
		x = x[finite]
		y = y[finite]
	# A correlation needs at least three points to have any residual degrees of freedom.
	if len(x) < 3:
		message = f"'{name}' requires at least 3 points but got {len(x)}"
		raise StatisticalTestError(message)
	result = stats.pearsonr(x, y, alternative = alternative)
	interval = result.confidence_interval(0.95)
	return StatisticResult(name, float(result.statistic), float(result.pvalue), float(len(x) - 2), alternative, (float(interval.low), float(interval.high)))


def partition_by_mutation(table: pandas.DataFrame, multiple_mutations: Iterable[str], column: str = 'mean') -> Tuple[pandas.Series, pandas.Series]:
	"""
		Splits the strain means into strains with a single resistance mutation and strains with multiple mutations.
	Parameters
	----------
	table: pandas.DataFrame
		A table with a `strain` column, usually the combined strain summary.
	multiple_mutations: Iterable[str]
		The strains known to carry more than one mutation.
	column: str
		The column holding the values to compare.

	Returns
	-------
	single, multiple: pandas.Series
	"""
	multiple_mutations = set(multiple_mutations)
	unknown = multiple_mutations - set(table['strain'])
	if unknown:
		logger.warning(f"The following multiple-mutation strains are not in the table: {sorted(unknown)}")
	is_multiple = table['strain'].isin(multiple_mutations)
	single = table.loc[~is_multiple, column]
	multiple = table.loc[is_multiple, column]
	return single, multiple


def merge_with_mic(summary: pandas.DataFrame, mic_table: pandas.DataFrame, letters: Optional[Dict[str, str]] = None) -> pandas.DataFrame:
	"""
		Joins the strain summary with the MIC table and adds the tukey letter groups.
		The result is sorted by mean fitness.
	"""
	mic_table = mic_table.copy()
	with numpy.errstate(divide = 'ignore', invalid = 'ignore'):
		mic_table['log2_mic_parent'] = numpy.log2(mic_table['MIC_parent'])
		mic_table['log2_mic_daughter'] = numpy.log2(mic_table['MIC_daughter'])
	mic_table['fold_change'] = mic_table['log2_mic_daughter'] - mic_table['log2_mic_parent']

	combined = summary.merge(mic_table, on = 'strain', how = 'inner')
	missing = sorted(set(summary['strain']) - set(combined['strain']))
	if missing:
		logger.warning(f"No MIC values were found for {missing}. These strains are excluded from the combined table.")

	if 'nickname' not in combined.columns:
		combined['nickname'] = combined['strain']
	else:
		combined['nickname'] = combined['nickname'].fillna(combined['strain'])
	if letters is not None:
		combined['group'] = combined['strain'].map(letters)

	combined = combined.sort_values(by = ['mean', 'strain']).reset_index(drop = True)
	return combined
