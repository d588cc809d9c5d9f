import json
from pathlib import Path
from typing import *

import matplotlib.pyplot as plt
import pandas
from loguru import logger
from statsmodels.graphics import gofplots
from statsmodels.regression import linear_model

import utilities
from analysis import anovacalc
from analysis.strainstats import StatisticResult
from graphics import save_figure


def plot_qq(regression: linear_model.RegressionResultsWrapper, filename: Path):
	""" QQ plot of the ANOVA residuals."""
	figure = gofplots.qqplot(regression.resid, fit = True, line = '45')
	save_figure(figure, filename)
	plt.close(figure)


def save_table(table: pandas.DataFrame, filename: Path):
	table.to_csv(filename, sep = "\t", index = False)


def save_anova(anova_table: pandas.DataFrame, filename: Path):
	anova_table.to_csv(filename, sep = '\t', index = True)


def save_regression(regression: linear_model.RegressionResults, filename: Path):
	filename.write_text(str(regression.summary()))


def save_table_tukey(tukey_result: Any, filename: Path, filename_json: Path) -> pandas.DataFrame:
	filename_json.write_text(json.dumps(utilities.tukey_to_json(tukey_result), indent = 4, sort_keys = True))

	table = anovacalc.tukey_to_table(tukey_result)
	table.to_csv(filename, sep = '\t', index = False)
	return table


def save_statistics(results: List[StatisticResult], filename: Path) -> pandas.DataFrame:
	table = pandas.DataFrame([i.to_dict() for i in results], columns = ['name', 'statistic', 'pvalue', 'df', 'alternative', 'lower', 'upper'])
	table.to_csv(filename, sep = '\t', index = False)
	return table


def format_result(result: StatisticResult) -> str:
	lines = [
		f"{result.name} (alternative: {result.alternative})",
		f"\tstatistic = {result.statistic:.4f}, df = {result.df:g}, p-value = {result.pvalue:.4g}"
	]
	if result.confidence_interval:
		lower, upper = result.confidence_interval
		lines.append(f"\t95 percent confidence interval: {lower:.4f} {upper:.4f}")
	return "\n".join(lines)


def format_summary(summary: pandas.DataFrame) -> str:
	columns = [i for i in ['strain', 'mean', 'n', 'lower', 'upper', 'group'] if i in summary.columns]
	return summary[columns].to_string(index = False, float_format = lambda s: f"{s:.4f}")


def format_report(summary: Optional[pandas.DataFrame], anova_table: Optional[pandas.DataFrame], pooled_variance: Optional[float],
		results: List[StatisticResult], omitted: Dict[str, str]) -> str:
	""" Generates the text report describing each test."""
	sections = list()
	if anova_table is not None:
		sections.append("One-way ANOVA\n" + anova_table.to_string())
		sections.append(f"Pooled variance (residual mean square): {pooled_variance:.5f}")
	if summary is not None:
		sections.append("Strain summary\n" + format_summary(summary))
	for result in results:
		sections.append(format_result(result))
	for name, reason in omitted.items():
		sections.append(f"{name}: omitted ({reason})")
	return "\n\n".join(sections) + "\n"


def save_report(report: str, filename: Path):
	filename.write_text(report)
	logger.info(f"Saved the report to '{filename}'")
