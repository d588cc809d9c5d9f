import string
from typing import *

import pandas
import statsmodels.api as sm
from loguru import logger
from statsmodels.regression import linear_model
from statsmodels.sandbox.stats.multicomp import TukeyHSDResults  # Used to add a typing annotation to tukeyhsd()
from statsmodels.stats.multicomp import MultiComparison

from analysis.strainstats import StatisticalTestError


def oneway_anova(table: pandas.DataFrame, column: str = 'log_relative_fitness', group: str = 'strain') -> Tuple[
	linear_model.RegressionResults, pandas.DataFrame]:
	"""
		Calculates a one-way ANOVA of `column` across the categories in `group`.
	Parameters
	----------
	table: The normalized fitness table.
	column: str; default 'log_relative_fitness'
	group: str; default 'strain'

	Returns
	-------
	regression:
		*.params: A pandas.Series object with the calculated coefficients
		*.resid: The residuals, used for the qq plot.
	anova: pandas.DataFrame
		Rows `C(strain)` and `Residual` with the `df`, `sum_sq`, `mean_sq`, `F`, and `PR(>F)` columns.
	"""
	number_of_groups = table[group].nunique()
	if number_of_groups < 2:
		message = f"ANOVA requires at least 2 groups in '{group}' but found {number_of_groups}"
		raise StatisticalTestError(message)
	if len(table) <= number_of_groups:
		message = f"ANOVA requires more observations ({len(table)}) than groups ({number_of_groups})"
		raise StatisticalTestError(message)

	equation = f'{column} ~ C({group})'
	logger.info(f"The equation used for ANOVA is {equation}")
	regression = linear_model.OLS.from_formula(equation, data = table).fit()

	anova_table = sm.stats.anova_lm(regression, typ = 1)
	return regression, anova_table


def pooled_variance(anova_table: pandas.DataFrame) -> float:
	""" The residual mean square of the ANOVA, used as the common variance estimate for every strain."""
	return float(anova_table.loc['Residual', 'mean_sq'])


def tukeyhsd(table: pandas.DataFrame, column: str = 'log_relative_fitness', group: str = 'strain', alpha: float = 0.05) -> TukeyHSDResults:
	"""
		Performs tukey multiple-comparison statistics.
	Parameters
	----------
	table: The normalized fitness table.
	column: The column with the relevant values.
	group: The column with the group labels.
	alpha: The family-wise error rate.
	"""
	number_of_unique_categories = table[group].nunique()
	logger.debug(f"tukey subject values: {table[group].unique()}")
	if number_of_unique_categories < 2:
		message = f"Tukey HSD requires at least 2 groups in '{group}' but found {number_of_unique_categories}"
		raise StatisticalTestError(message)
	mc = MultiComparison(table[column], table[group])
	return mc.tukeyhsd(alpha = alpha)


def tukey_to_table(tukey_result: TukeyHSDResults) -> pandas.DataFrame:
	""" Converts the pairwise comparisons of the tukey result into a table. The group labels keep their original type."""
	rows = list()
	pairs = [(i, j) for index, i in enumerate(tukey_result.groupsunique) for j in tukey_result.groupsunique[index + 1:]]
	for (left, right), meandiff, pvalue, (lower, upper), reject in zip(
			pairs, tukey_result.meandiffs, tukey_result.pvalues, tukey_result.confint, tukey_result.reject):
		row = {
			'group1':   left,
			'group2':   right,
			'meandiff': float(meandiff),
			'p-adj':    float(pvalue),
			'lower':    float(lower),
			'upper':    float(upper),
			'reject':   bool(reject)
		}
		rows.append(row)
	return pandas.DataFrame(rows)


def significant_pairs(tukey_result: TukeyHSDResults) -> List[Tuple[Any, Any]]:
	table = tukey_to_table(tukey_result)
	table = table[table['reject']]
	return list(zip(table['group1'], table['group2']))


def _absorb(columns: List[Set[str]]) -> List[Set[str]]:
	""" Removes any column that is contained within another column."""
	result = list()
	for index, column in enumerate(columns):
		is_contained = False
		for other_index, other in enumerate(columns):
			if index == other_index:
				continue
			# Identical columns: keep the first one.
			if column < other or (column == other and other_index < index):
				is_contained = True
				break
		if not is_contained:
			result.append(column)
	return result


def compact_letter_display(means: pandas.Series, pairs: Iterable[Tuple[str, str]]) -> Dict[str, str]:
	"""
		Assigns letter groups to each group using the insert-and-absorb algorithm.
		Groups sharing a letter are not significantly different from each other.
	Parameters
	----------
	means: pandas.Series
		Maps each group to its mean value. Letters are assigned starting from the largest mean.
	pairs: Iterable[Tuple[str, str]]
		The pairs of groups which are significantly different.

	Returns
	-------
	Dict[str,str]
		Maps each group to its letter code. Ex. {'WT': 'a', 'A244T': 'ab', 'N274Y': 'b'}
	"""
	order = list(means.sort_values(ascending = False, kind = 'mergesort').index)
	columns: List[Set[str]] = [set(order)]

	for left, right in pairs:
		updated = list()
		for column in columns:
			if left in column and right in column:
				updated.append(column - {left})
				updated.append(column - {right})
			else:
				updated.append(column)
		columns = _absorb(updated)

	# The first letter goes to the column containing the group with the highest mean.
	rank = {label: index for index, label in enumerate(order)}
	columns = sorted(columns, key = lambda s: sorted(rank[i] for i in s))
	if len(columns) > len(string.ascii_lowercase):
		message = f"Cannot represent {len(columns)} letter groups with single letters."
		raise ValueError(message)

	letters = {label: "" for label in order}
	for letter, column in zip(string.ascii_lowercase, columns):
		for label in column:
			letters[label] += letter
	return letters


def tukey_letters(table: pandas.DataFrame, tukey_result: TukeyHSDResults, column: str = 'log_relative_fitness', group: str = 'strain') -> Dict[str, str]:
	""" Computes the letter groups for each strain from the tukey result."""
	means = table.groupby(by = group)[column].mean()
	pairs = significant_pairs(tukey_result)
	logger.debug(f"Found {len(pairs)} significantly different pairs.")
	return compact_letter_display(means, pairs)
