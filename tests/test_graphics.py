import matplotlib.pyplot as plt
import pandas
import pytest

from graphics import CorrelationPlot, StrainFitnessPlot


@pytest.fixture
def combined_table() -> pandas.DataFrame:
	table = pandas.DataFrame({
		'strain':            ['S1', 'S2', 'S3', 'S4'],
		'nickname':          ['one', 'two', 'three', 'four'],
		'mean':              [-0.01, -0.2, -0.05, -0.1],
		'n':                 [5, 5, 4, 1],
		'half_width':        [0.08, 0.08, 0.1, float('nan')],
		'log2_mic_daughter': [-2, 2, 0, 1],
		'fold_change':       [4, 8, 6, 7],
		'group':             ['a', 'c', 'ab', 'bc']
	})
	table['lower'] = table['mean'] - table['half_width']
	table['upper'] = table['mean'] + table['half_width']
	return table


def test_correlation_plot(combined_table, tmp_path):
	figure = CorrelationPlot().plot(combined_table, {'log2_mic_daughter': (-0.9, 0.1)}, filename = tmp_path / "correlation.png")

	assert len(figure.axes) == 2
	assert [ax.get_xlabel() for ax in figure.axes] == ['MIC of resistant strain (log2)', 'Fold change in MIC (log2)']
	texts = [text.get_text() for text in figure.axes[0].texts]
	assert 'A' in texts
	assert any(i.startswith('r = -0.900') for i in texts)
	assert (tmp_path / "correlation.png").exists()
	assert (tmp_path / "correlation.svg").exists()
	plt.close(figure)


def test_strain_fitness_plot_is_sorted_by_fitness(combined_table, tmp_path):
	ax = StrainFitnessPlot().plot(combined_table, filename = tmp_path / "strainfitness.png")

	labels = [label.get_text() for label in ax.get_xticklabels()]
	assert labels == ['two', 'four', 'three', 'one']
	letters = [text.get_text() for text in ax.texts]
	assert letters == ['c', 'bc', 'ab', 'a']
	assert (tmp_path / "strainfitness.svg").exists()
	plt.close(ax.figure)
