from pathlib import Path
from typing import List, Optional, Union

import pandas
from loguru import logger

COMPETITION_COLUMNS = ['paired_ID', 'block', 'background', 'antibiotic', 'competitor_1', 'competitor_2', 'comp1_d0', 'comp1_d3', 'comp2_d0',
	'comp2_d3']
COUNT_COLUMNS = ['comp1_d0', 'comp1_d3', 'comp2_d0', 'comp2_d3']
MIC_COLUMNS = ['strain', 'MIC_parent', 'MIC_daughter']


class DataLoadError(ValueError):
	""" Raised when an input table is missing, cannot be read, or lacks a required column."""
	pass


class ValidateTable:
	# makes sure the input tables are formatted correctly.
	def __init__(self, antibiotic: Optional[str] = None):
		# Only keep competitions performed with this antibiotic.
		self.antibiotic = antibiotic

		self.string_columns = ['paired_ID', 'background', 'antibiotic', 'competitor_1', 'competitor_2', 'strain']

	@staticmethod
	def read_table(filename: Union[str, Path]) -> pandas.DataFrame:
		filename = Path(filename)
		if not filename.exists():
			message = f"The file '{filename}' does not exist."
			raise DataLoadError(message)
		if filename.suffix == '.csv':
			kwargs = {'sep': ','}
		elif filename.suffix in {'.tsv', '.txt', '.tab'}:
			kwargs = {'sep': '\t'}
		elif filename.suffix == '.xlsx' or filename.suffix == '.xls':
			kwargs = None
		else:
			message = f"Cannot determine the filetype of '{filename}'"
			raise DataLoadError(message)

		try:
			if kwargs is None:
				table = pandas.read_excel(filename)
			else:
				table = pandas.read_csv(filename, **kwargs)
		except (OSError, ValueError) as exception:
			message = f"Could not read '{filename}': {exception}"
			raise DataLoadError(message) from exception
		logger.debug(f"Read {len(table)} rows from '{filename.name}'")
		return table

	@staticmethod
	def _check_required_columns(table: pandas.DataFrame, required: List[str], label: str) -> pandas.DataFrame:
		table.columns = [str(i).strip() for i in table.columns]
		missing = [i for i in required if i not in table.columns]
		if missing:
			message = f"The {label} table is missing the required columns {missing}. Found {list(table.columns)}"
			raise DataLoadError(message)
		return table

	def _strip_strings(self, table: pandas.DataFrame) -> pandas.DataFrame:
		for column in self.string_columns:
			if column in table.columns:
				table[column] = table[column].apply(lambda s: s.strip() if isinstance(s, str) else s)
		return table

	@staticmethod
	def _convert_counts(table: pandas.DataFrame, columns: List[str]) -> pandas.DataFrame:
		for column in columns:
			values = pandas.to_numeric(table[column], errors = 'coerce')
			invalid = values.isna() & table[column].notna()
			if invalid.any():
				logger.warning(f"Found {invalid.sum()} non-numeric values in '{column}'. These are treated as missing.")
			table[column] = values
		return table

	def _filter_antibiotic(self, table: pandas.DataFrame) -> pandas.DataFrame:
		if self.antibiotic is None:
			return table
		filtered = table[table['antibiotic'] == self.antibiotic]
		logger.info(f"Kept {len(filtered)} of {len(table)} competitions performed with '{self.antibiotic}'")
		return filtered

	def load_competition_table(self, table: Union[Path, pandas.DataFrame]) -> pandas.DataFrame:
		if not isinstance(table, pandas.DataFrame):
			# Assume it is a Pathlike object
			table = self.read_table(table)
		table = self._check_required_columns(table.copy(), COMPETITION_COLUMNS, 'competition')
		table = self._strip_strings(table)
		table = self._convert_counts(table, COUNT_COLUMNS)
		table = self._filter_antibiotic(table)
		return table.reset_index(drop = True)

	def load_mic_table(self, table: Union[Path, pandas.DataFrame]) -> pandas.DataFrame:
		if not isinstance(table, pandas.DataFrame):
			table = self.read_table(table)
		table = self._check_required_columns(table.copy(), MIC_COLUMNS, 'MIC')
		table = self._strip_strings(table)
		table = self._convert_counts(table, ['MIC_parent', 'MIC_daughter'])
		return table
