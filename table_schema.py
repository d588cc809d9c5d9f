"""
	This file is only used as a reminder of how each table in the analysis is formatted
"""
from typing import Optional, Union


# Reminder of the format of each table.
class TableSchemaCompetition:
	# One competition assay replicate, as read from the input file.
	paired_ID: Union[str, int]  # Groups the test competition with its reference competition.
	block: Union[str, int]  # The experimental batch.
	background: str  # The genetic lineage. The ancestral strain has the same name as its background.
	antibiotic: str
	competitor_1: str  # The strain being tested.
	competitor_2: str  # The common competitor.
	comp1_d0: float
	comp1_d3: float
	comp2_d0: float
	comp2_d3: float


class TableSchemaFitness:
	strain: str  # `competitor_1`
	background: str
	antibiotic: str
	competitor_2: str
	paired_ID: Union[str, int]
	block: Union[str, int]
	m1: float  # Malthusian parameter of competitor_1
	m2: float  # Malthusian parameter of competitor_2
	relative_fitness: float  # m1 / m2. NaN when m2 is 0.


class TableSchemaNormalizedFitness:
	# One row per (block, paired_ID) group.
	strain: str
	background: str
	antibiotic: str
	block: Union[str, int]
	paired_ID: Union[str, int]
	reference: str  # The strain used as the denominator
	log_relative_fitness: float


class TableSchemaStrainSummary:
	strain: str
	mean: float
	n: int
	std: float
	half_width: float  # NaN when n < 2
	lower: float
	upper: float


class TableSchemaMIC:
	strain: str
	MIC_parent: float
	MIC_daughter: float
	nickname: Optional[str]  # Optional. Used to label the strain fitness figure.


class TableSchemaCombined(TableSchemaStrainSummary, TableSchemaMIC):
	# The strain summary merged with the MIC table. Sorted by `mean`.
	log2_mic_parent: float
	log2_mic_daughter: float
	fold_change: float  # log2(MIC_daughter) - log2(MIC_parent)
	group: str  # The tukey letter group


class TableSchemaAnova:
	# Contains the results of the ANOVA analysis
	df: int
	sum_sq: float
	mean_sq: float  # The `Residual` row is the pooled variance.
	F: float
	PR: float  # Actual name is PR(>F)


class TableSchemaTukey:
	group1: str
	group2: str
	meandiff: float
	p_adj: float  # Actual name: p-adj
	lower: float
	upper: float
	reject: bool


class TableSchemaStatistics:
	# One row per statistical test.
	name: str
	statistic: float
	pvalue: float
	df: float
	alternative: str
	lower: float
	upper: float
