from pathlib import Path
from typing import *

import matplotlib
import matplotlib.pyplot as plt
import numpy
import pandas
import seaborn
from loguru import logger

matplotlib.rcParams.update({'svg.fonttype': 'none'})


def save_figure(figure: plt.Figure, filename: Path) -> List[Path]:
	""" Saves the figure as both a png and svg file."""
	filename_png = filename.with_suffix('.png')
	filename_svg = filename.with_suffix('.svg')
	figure.savefig(filename_png, dpi = 500, bbox_inches = 'tight')
	figure.savefig(filename_svg, bbox_inches = 'tight')
	logger.debug(f"Saved '{filename_png.name}' and '{filename_svg.name}'")
	return [filename_png, filename_svg]


class CorrelationPlot:
	""" Plots the mean fitness of each strain against the MIC of the resistant strain and against the fold change in MIC."""

	def __init__(self, y: str = 'mean'):
		self.y = y
		# (column, x-axis label) for each panel.
		self.panels = [
			('log2_mic_daughter', 'MIC of resistant strain (log2)'),
			('fold_change', 'Fold change in MIC (log2)')
		]
		self.panel_labels = "ABCDEFGH"

		self.figure_size = (12, 5.5)
		self.color_background = '#FFFFFF'
		self.color_axis = '#000000'
		self.color_point = '#377eb8'
		self.color_line = '#e41a1c'
		self.marker_point_size = 60
		self.marker_point_alpha = 0.8
		self.label_y = 'Relative fitness (ln)'
		self.label_panel_size = 20

	def _format_axes(self, ax: plt.Axes, xlabel: str, panel_label: str) -> plt.Axes:
		ax.set_facecolor(self.color_background)
		ax.set_xlabel(xlabel)
		ax.set_ylabel(self.label_y)
		for side in ['top', 'right']:
			ax.spines[side].set_visible(False)
		for side in ['left', 'bottom']:
			ax.spines[side].set_edgecolor(self.color_axis)
		ax.text(-0.12, 1.05, panel_label, transform = ax.transAxes, fontsize = self.label_panel_size, fontweight = 'bold', va = 'bottom')
		return ax

	def plot_panel(self, table: pandas.DataFrame, x: str, ax: plt.Axes, correlation: Optional[Tuple[float, float]] = None) -> plt.Axes:
		""" A scatterplot of `x` against the mean fitness with a linear fit."""
		table = table[numpy.isfinite(table[x]) & numpy.isfinite(table[self.y])]
		ax = seaborn.regplot(
			data = table,
			x = x, y = self.y,
			ax = ax,
			ci = None,
			scatter_kws = {'s': self.marker_point_size, 'alpha': self.marker_point_alpha, 'color': self.color_point},
			line_kws = {'color': self.color_line}
		)
		if correlation is not None:
			r, pvalue = correlation
			text = f"r = {r:.3f}\np = {pvalue:.3g}"
			ax.text(0.05, 0.95, text, transform = ax.transAxes, va = 'top')
		return ax

	def plot(self, table: pandas.DataFrame, correlations: Optional[Dict[str, Tuple[float, float]]] = None, filename: Optional[Path] = None) -> plt.Figure:
		"""
			Parameters
			----------
			table: pandas.DataFrame
				The combined table. Should have the `log2_mic_daughter`, `fold_change`, and `mean` columns.
			correlations: Dict[str, Tuple[float, float]]
				Maps the x-axis column of each panel to the pearson r and p-value to display.
			filename: Optional[Path]
				Where to save the figure. The suffix is replaced with '.png' and '.svg'.
		"""
		if correlations is None:
			correlations = dict()
		figure, axes = plt.subplots(1, len(self.panels), figsize = self.figure_size)

		for (x, xlabel), ax, panel_label in zip(self.panels, axes, self.panel_labels):
			self.plot_panel(table, x, ax, correlations.get(x))
			self._format_axes(ax, xlabel, panel_label)
		figure.tight_layout()

		if filename:
			save_figure(figure, filename)
		return figure
