import math
from typing import *

import numpy
import pandas
from loguru import logger
from toolz import itertoolz

from analysis import equations

# Columns copied from the competition table onto every fitness record, when present.
METADATA_COLUMNS = ['background', 'antibiotic', 'competitor_2', 'paired_ID', 'block']


def calculate_malthusian_fitness(table: pandas.DataFrame) -> pandas.DataFrame:
	"""
		Calculates the malthusian parameter of both competitors and the relative fitness of `competitor_1`.
	Parameters
	----------
	table: pandas.DataFrame
		The competition table. Should have the `competitor_1`, `comp1_d0`, `comp1_d3`, `comp2_d0`, and `comp2_d3` columns.

	Returns
	-------
	pandas.DataFrame
		One row per competition with the `strain`, `m1`, `m2`, and `relative_fitness` columns.
	"""
	# A day-3 count below 1 means the competitor was not recovered, so the observation is discarded.
	failed = ~(table['comp1_d3'] >= 1)
	if failed.any():
		logger.warning(f"Removing {failed.sum()} competitions where competitor_1 was not recovered on day 3 (comp1_d3 < 1).")
		for index, row in table[failed].iterrows():
			logger.debug(f"\tblock {row['block']}, paired_ID {row['paired_ID']}, competitor_1 '{row['competitor_1']}'")
	table = table[~failed]

	fitness_table = table[[i for i in METADATA_COLUMNS if i in table.columns]].copy()
	fitness_table.insert(0, 'strain', table['competitor_1'])
	fitness_table['m1'] = equations.malthusian_parameter(table['comp1_d0'], table['comp1_d3'])
	fitness_table['m2'] = equations.malthusian_parameter(table['comp2_d0'], table['comp2_d3'])
	fitness_table['relative_fitness'] = equations.relative_fitness(fitness_table['m1'], fitness_table['m2'])

	return fitness_table.reset_index(drop = True)


def is_reference(record: Dict[str, Any], reference_strains: Optional[Iterable[str]] = None) -> bool:
	""" Whether `record` is the reference competition of its pair. Without explicit `reference_strains`
		the reference is the competition of the ancestral (background) strain.
	"""
	if reference_strains:
		return record['strain'] in reference_strains
	return record['strain'] == record.get('background')


def log_ratio(numerator: float, denominator: float) -> float:
	""" ln(numerator / denominator), or NaN when the ratio is undefined or not positive."""
	if denominator == 0 or numpy.isnan(denominator) or numpy.isnan(numerator):
		return math.nan
	ratio = numerator / denominator
	if ratio <= 0:
		return math.nan
	return math.log(ratio)


def normalize_pair(key: Tuple[Any, Any], group: List[Dict[str, Any]], reference_strains: Optional[Iterable[str]] = None) -> Optional[Dict[str, Any]]:
	""" Converts a single (block, paired_ID) group into a normalized fitness record. Returns None if the group cannot be paired."""
	block, paired_id = key
	if len(group) != 2:
		logger.warning(f"Expected 2 competitions for block {block}, paired_ID {paired_id} but found {len(group)}. Skipping.")
		return None

	references = [i for i in group if is_reference(i, reference_strains)]
	if len(references) != 1:
		strains = [i['strain'] for i in group]
		logger.warning(f"Could not identify a single reference competition for block {block}, paired_ID {paired_id} ({strains}). Skipping.")
		return None
	reference = references[0]
	test = group[1] if group[0] is reference else group[0]

	result = {
		'strain':               test['strain'],
		'background':           test.get('background'),
		'antibiotic':           test.get('antibiotic'),
		'block':                block,
		'paired_ID':            paired_id,
		'reference':            reference['strain'],
		'log_relative_fitness': log_ratio(test['relative_fitness'], reference['relative_fitness'])
	}
	return result


def normalize_against_common_competitor(table: pandas.DataFrame, reference_strains: Optional[Iterable[str]] = None) -> pandas.DataFrame:
	"""
		Normalizes the relative fitness of each test strain against the reference strain competed
		against the same common competitor within the same block.
	Parameters
	----------
	table: pandas.DataFrame
		The output of `calculate_malthusian_fitness`.
	reference_strains: Optional[Iterable[str]]
		The strains acting as the denominator of each pair. Defaults to the strain matching the `background` column.

	Returns
	-------
	pandas.DataFrame
		One row per (block, paired_ID) group. `log_relative_fitness` may be NaN; see `drop_undefined`.
	"""
	if reference_strains is not None:
		reference_strains = set(reference_strains)
	records = table.to_dict('records')
	groups = itertoolz.groupby(lambda s: (s['block'], s['paired_ID']), records)
	logger.debug(f"Found {len(groups)} (block, paired_ID) groups in {len(records)} competitions.")

	rows = [normalize_pair(key, group, reference_strains) for key, group in groups.items()]
	rows = [i for i in rows if i is not None]

	columns = ['strain', 'background', 'antibiotic', 'block', 'paired_ID', 'reference', 'log_relative_fitness']
	normalized_table = pandas.DataFrame(rows, columns = columns)
	return normalized_table


def drop_undefined(table: pandas.DataFrame, column: str = 'log_relative_fitness') -> pandas.DataFrame:
	""" Removes rows where `column` is missing or not finite."""
	values = pandas.to_numeric(table[column], errors = 'coerce')
	defined = numpy.isfinite(values)
	if not defined.all():
		logger.warning(f"Removing {(~defined).sum()} rows with an undefined '{column}'.")
		for index, row in table[~defined].iterrows():
			logger.debug(f"\tblock {row['block']}, paired_ID {row['paired_ID']}, strain '{row['strain']}'")
	return table[defined].reset_index(drop = True)

