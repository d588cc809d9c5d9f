from pathlib import Path

import utilities


class Filenames:
	""" Holds the filenames for important files/figures/etc.

		Output File Stucture
		<folder>/
			report.txt
			data/
				fitness.tsv, normalized_fitness.tsv, strain_summary.tsv, combined.tsv, statistics.tsv,
				anova.tsv, regression.txt, tukey.tsv, tukeyhsdresults.json
			figures/
				correlation.png/svg, strainfitness.png/svg, qq.png/svg
	"""

	def __init__(self, folder: Path):
		self.table_format = '.tsv'
		self.figure_format = '.png'
		folder = utilities.checkdir(folder)
		self.folder = folder
		self.folder_data = utilities.checkdir(folder / "data")
		self.folder_figure = utilities.checkdir(folder / "figures")

		self.filename_report = folder / "report.txt"

		# Tables
		# Malthusian parameters and relative fitness of every competition that passed filtering.
		self.filename_table_fitness = self.folder_data / ("fitness" + self.table_format)
		# Log relative fitness for each (block, paired_ID) group.
		self.filename_table_normalized = self.folder_data / ("normalized_fitness" + self.table_format)
		self.filename_table_summary = self.folder_data / ("strain_summary" + self.table_format)
		# The strain summary merged with the MIC values and tukey groups.
		self.filename_table_combined = self.folder_data / ("combined" + self.table_format)
		# One row per t-test/correlation
		self.filename_table_statistics = self.folder_data / ("statistics" + self.table_format)

		# Summarizes the regresson after applying an ordinary least-squares model to the input data.
		self.filename_table_regression_model = self.folder_data / "regression.txt"
		self.filename_table_anova = self.folder_data / ("anova" + self.table_format)
		# Contains all paired tukey calulations.
		self.filename_table_tukey = self.folder_data / ("tukey" + self.table_format)
		self.filename_data_tukey = self.folder_data / "tukeyhsdresults.json"

		# Figures. Saved as both a raster and vector image.
		self.filename_figure_correlation = self.folder_figure / ("correlation" + self.figure_format)
		self.filename_figure_fitness = self.folder_figure / ("strainfitness" + self.figure_format)
		self.filename_figure_qq = self.folder_figure / ("qq" + self.figure_format)
