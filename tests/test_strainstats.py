import math

import numpy
import pandas
import pytest

from analysis import equations, strainstats
from analysis.strainstats import StatisticalTestError


@pytest.mark.parametrize(
	"n, expected",
	[
		(5, 2.776),
		(4, 3.182),
		(3, 4.303),
		(30, 2.045)
	]
)
def test_critical_value(n, expected):
	assert equations.critical_value(n) == pytest.approx(expected, abs = 1E-3)


def test_critical_value_of_a_single_replicate():
	assert math.isnan(equations.critical_value(1))


@pytest.mark.parametrize(
	"n, expected",
	[
		(5, 2.776 * math.sqrt(0.00441 / 5)),
		(4, 3.182 * math.sqrt(0.00441 / 4))
	]
)
def test_confidence_half_width(n, expected):
	result = equations.confidence_half_width(n, 0.00441)
	assert result == pytest.approx(expected, rel = 1E-3)


def test_confidence_interval():
	summary = pandas.DataFrame({
		'strain': ['S1', 'S2', 'S3'],
		'mean':   [-0.1, -0.2, -0.3],
		'n':      [5, 4, 1]
	})
	result = strainstats.confidence_interval(summary, 0.00441)

	assert result['half_width'][0] == pytest.approx(0.0825, abs = 1E-4)
	assert result['half_width'][1] == pytest.approx(0.1057, abs = 1E-4)
	assert result['lower'][0] == pytest.approx(-0.1 - result['half_width'][0])
	assert result['upper'][1] == pytest.approx(-0.2 + result['half_width'][1])
	# A single replicate cannot produce an interval.
	assert math.isnan(result['half_width'][2])
	assert math.isnan(result['upper'][2])
	# The input table is not modified.
	assert 'half_width' not in summary.columns


def test_summarize():
	table = pandas.DataFrame({
		'strain':               ['S1', 'S1', 'S1', 'S2', 'S2'],
		'log_relative_fitness': [-0.1, -0.2, -0.3, 0.1, 0.3]
	})
	result = strainstats.summarize(table).set_index('strain')

	assert result.loc['S1', 'mean'] == pytest.approx(-0.2)
	assert result.loc['S2', 'mean'] == pytest.approx(0.2)
	assert result['n'].to_dict() == {'S1': 3, 'S2': 2}
	assert result.loc['S1', 'std'] == pytest.approx(0.1)


def test_one_sample_ttest_on_negative_values():
	values = [-0.1, -0.12, -0.09, -0.11, -0.13]
	result = strainstats.one_sample_ttest(values, mu = 0, alternative = 'less')

	assert result.statistic < 0
	assert result.pvalue < 0.001
	assert result.df == 4
	assert result.alternative == 'less'


def test_one_sample_ttest_ignores_missing_values():
	values = [-0.1, -0.12, numpy.nan, -0.09]
	result = strainstats.one_sample_ttest(values)
	assert result.df == 2


def test_one_sample_ttest_requires_two_values():
	with pytest.raises(StatisticalTestError):
		strainstats.one_sample_ttest([-0.1])


@pytest.mark.parametrize("alternative", ['two.sided', 'two-sided', 'less', 'greater'])
def test_pearson_correlation_of_linear_data(alternative):
	x = [1, 2, 3, 4, 5]
	y = [2 * i for i in x]
	result = strainstats.pearson_correlation(x, y, alternative = alternative)

	assert result.statistic == pytest.approx(1.0)
	assert result.df == 3


def test_pearson_correlation_errors():
	with pytest.raises(StatisticalTestError):
		strainstats.pearson_correlation([1, 2, 3], [1, 2])
	with pytest.raises(StatisticalTestError):
		strainstats.pearson_correlation([1, 2], [1, 2])


def test_pearson_correlation_ignores_undefined_values():
	x = [1, 2, math.nan, 3, -math.inf, 4]
	y = [2, 4, 6, 6, 10, 8]
	result = strainstats.pearson_correlation(x, y)

	assert result.statistic == pytest.approx(1.0)
	assert result.df == 2

	with pytest.raises(StatisticalTestError):
		strainstats.pearson_correlation([1, 2, math.nan], [1, 2, 3])


def test_invalid_alternative():
	with pytest.raises(ValueError):
		strainstats.one_sample_ttest([1, 2, 3], alternative = 'bigger')


def test_two_sample_ttest_uses_pooled_variance():
	single = [0.0, 0.01, -0.01]
	multiple = [-0.3, -0.32, -0.28]
	result = strainstats.two_sample_ttest(single, multiple, alternative = 'greater')

	assert result.statistic > 0
	assert result.pvalue < 0.01
	# Student's t-test has n1 + n2 - 2 degrees of freedom.
	assert result.df == 4


def test_partition_by_mutation():
	table = pandas.DataFrame({
		'strain': ['S1', 'S2', 'S3', 'S4'],
		'mean':   [-0.01, -0.02, -0.1, -0.2]
	})
	single, multiple = strainstats.partition_by_mutation(table, ['S3', 'S4', 'S9'])

	assert single.tolist() == [-0.01, -0.02]
	assert multiple.tolist() == [-0.1, -0.2]


def test_merge_with_mic():
	summary = pandas.DataFrame({
		'strain': ['S1', 'S2', 'S3'],
		'mean':   [-0.01, -0.2, -0.1],
		'n':      [5, 5, 4]
	})
	mic = pandas.DataFrame({
		'strain':       ['S1', 'S2', 'S3', 'S5'],
		'MIC_parent':   [0.25, 0.25, 1, 1],
		'MIC_daughter': [1, 4, 1, 8]
	})
	letters = {'S1': 'a', 'S2': 'b', 'S3': 'ab'}
	result = strainstats.merge_with_mic(summary, mic, letters)

	# Sorted by the mean fitness, strains without a fitness value are excluded.
	assert list(result['strain']) == ['S2', 'S3', 'S1']
	assert result['fold_change'].tolist() == pytest.approx([4, 0, 2])
	assert result['log2_mic_daughter'].tolist() == pytest.approx([2, 0, 0])
	assert list(result['group']) == ['b', 'ab', 'a']
	assert list(result['nickname']) == ['S2', 'S3', 'S1']


def test_merge_with_mic_nicknames(mic_table):
	summary = pandas.DataFrame({'strain': ['S1', 'S4'], 'mean': [-0.01, -0.1], 'n': [5, 4]})
	result = strainstats.merge_with_mic(summary, mic_table)

	assert list(result['nickname']) == ['gyrA-S83L/gyrA-D87N/parC-S80I', 'gyrA-S83L']
	assert 'group' not in result.columns
