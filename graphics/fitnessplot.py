from pathlib import Path
from typing import *

import matplotlib.pyplot as plt
import numpy
import pandas

from graphics.correlationplot import save_figure


class StrainFitnessPlot:
	""" Plots the mean fitness of each strain with its confidence interval and tukey letter group."""

	def __init__(self):
		self.figure_size = (10, 6)
		self.color_background = '#FFFFFF'
		self.color_point = '#000000'
		self.color_zero = '#999999'

		self.marker_mean = 'o'
		self.marker_size = 7
		self.capsize = 4
		# How far above the error bar the letter group is written, as a fraction of the y-range.
		self.letter_offset = 0.03
		self.label_x = 'Strain'
		self.label_y = 'Relative fitness (ln)'
		self.xtick_rotation = 70

	@staticmethod
	def _order(table: pandas.DataFrame) -> pandas.DataFrame:
		return table.sort_values(by = ['mean', 'strain']).reset_index(drop = True)

	def add_letters(self, table: pandas.DataFrame, ax: plt.Axes) -> plt.Axes:
		""" Writes the tukey letter group above each error bar."""
		if 'group' not in table.columns:
			return ax
		ymin, ymax = ax.get_ylim()
		offset = (ymax - ymin) * self.letter_offset
		for position, row in table.iterrows():
			top = row['upper'] if numpy.isfinite(row['upper']) else row['mean']
			ax.text(position, top + offset, row['group'], ha = 'center', va = 'bottom')
		# Make room for the letters.
		ax.set_ylim(ymin, ymax + offset * 4)
		return ax

	def plot(self, table: pandas.DataFrame, filename: Optional[Path] = None, ax: Optional[plt.Axes] = None) -> plt.Axes:
		"""
			Parameters
			----------
			table: pandas.DataFrame
				The combined table. Should have the `strain`, `nickname`, `mean`, `half_width`, and `upper` columns and,
				optionally, the `group` column.
			filename: Optional[Path]
			ax: Optional[plt.Axes]
				A preexisting plt.Axes object to add plots to.
		"""
		table = self._order(table)
		if ax is None:
			figure, ax = plt.subplots(figsize = self.figure_size)
		ax.set_facecolor(self.color_background)

		positions = numpy.arange(len(table))
		# Strains with a single replicate have no interval.
		errors = table['half_width'].fillna(0).values
		ax.errorbar(
			positions, table['mean'].values, yerr = errors,
			fmt = self.marker_mean,
			markersize = self.marker_size,
			color = self.color_point,
			capsize = self.capsize,
			zorder = 2
		)
		ax.axhline(0, color = self.color_zero, linestyle = '--', zorder = 1)

		labels = table['nickname'] if 'nickname' in table.columns else table['strain']
		ax.set_xticks(positions)
		ax.set_xticklabels(labels, rotation = self.xtick_rotation, ha = 'right')
		ax.set_xlabel(self.label_x)
		ax.set_ylabel(self.label_y)
		for side in ['top', 'right']:
			ax.spines[side].set_visible(False)

		ax = self.add_letters(table, ax)

		if filename:
			ax.figure.tight_layout()
			save_figure(ax.figure, filename)
		return ax
