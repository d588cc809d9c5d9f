import math

import numpy
import pandas
from loguru import logger
from scipy import stats

# Each competition is diluted 1:100 and replated three times before the day-3 count.
dilution_factor = 100
dilution_steps = 3


def malthusian_parameter(initial_count: pandas.Series, final_count: pandas.Series) -> pandas.Series:
	""" ln(final_count * dilution_factor**dilution_steps / initial_count). Infinite values (zero counts) are returned as NaN."""
	with numpy.errstate(divide = 'ignore', invalid = 'ignore'):
		result = numpy.log(final_count * dilution_factor ** dilution_steps / initial_count)
	return result.replace([numpy.inf, -numpy.inf], numpy.nan)


def relative_fitness(m1: pandas.Series, m2: pandas.Series) -> pandas.Series:
	""" The ratio of two malthusian parameters. Undefined (NaN) when the denominator is zero."""
	undefined = (m2 == 0) | m2.isna()
	if undefined.any():
		logger.trace(f"{undefined.sum()} relative fitness values are undefined due to a zero or missing denominator.")
	return m1 / m2.where(~undefined)


def critical_value(n: int, confidence: float = 0.95) -> float:
	""" Two-sided Student-t critical value for `n` replicates (n - 1 degrees of freedom)."""
	if n < 2:
		return math.nan
	quantile = 1 - (1 - confidence) / 2
	return float(stats.t.ppf(quantile, n - 1))


def confidence_half_width(n: int, pooled_variance: float, confidence: float = 0.95) -> float:
	return critical_value(n, confidence) * math.sqrt(pooled_variance / n)
