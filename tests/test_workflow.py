import json
import math

import pandas
import pytest

import runfitness
from analysis import FitnessCostAnalysis, equations


@pytest.fixture
def results(filename_competition, filename_mic):
	workflow = FitnessCostAnalysis(multiple_mutations = ['S3', 'S4'])
	return workflow.run(filename_competition, filename_mic)


def test_fitness_tables(results):
	assert len(results.fitness_table) == 39
	assert len(results.normalized_table) == 19


def test_summary_table(results):
	summary = results.summary_table.set_index('strain')

	assert summary['n'].to_dict() == {'S1': 5, 'S2': 5, 'S3': 5, 'S4': 4}
	assert (summary['mean'] < 0).all()
	# The most resistant strain pays the largest cost.
	assert summary['mean'].idxmin() == 'S4'


def test_confidence_intervals_use_anova_residual(results):
	pooled_variance = results.anova_table.loc['Residual', 'mean_sq']
	summary = results.summary_table.set_index('strain')

	assert results.pooled_variance == pytest.approx(pooled_variance)
	assert summary.loc['S1', 'half_width'] == pytest.approx(equations.critical_value(5) * math.sqrt(pooled_variance / 5))
	assert summary.loc['S4', 'half_width'] == pytest.approx(equations.critical_value(4) * math.sqrt(pooled_variance / 4))


def test_pooled_variance_override(filename_competition, filename_mic):
	results = FitnessCostAnalysis(pooled_variance = 0.00441).run(filename_competition, filename_mic)
	summary = results.summary_table.set_index('strain')

	assert summary.loc['S1', 'half_width'] == pytest.approx(0.0825, abs = 1E-4)
	assert summary.loc['S4', 'half_width'] == pytest.approx(0.1057, abs = 1E-4)


def test_combined_table(results):
	combined = results.combined_table

	# S5 does not have any competitions.
	assert list(combined['strain']) == list(combined.sort_values('mean')['strain'])
	assert set(combined['strain']) == {'S1', 'S2', 'S3', 'S4'}
	assert combined['group'].notna().all()
	assert (combined['group'].str.len() > 0).all()
	assert combined['nickname'].iloc[0] == 'gyrA-S83L/gyrA-D87N/parC-S80I'


def test_statistical_tests(results):
	names = [i.name for i in results.results]

	assert "one-sample t-test (all strains)" in names
	assert "one-sample t-test (S4)" in names
	assert "two-sample t-test (single vs multiple mutations)" in names
	assert set(results.correlations.keys()) == {'log2_mic_daughter', 'fold_change'}
	assert results.omitted == {}

	overall = [i for i in results.results if i.name == "one-sample t-test (all strains)"][0]
	assert overall.statistic < 0
	assert overall.pvalue < 0.05


def test_two_sample_ttest_is_omitted_without_configuration(filename_competition, filename_mic):
	results = FitnessCostAnalysis().run(filename_competition, filename_mic)
	assert "two-sample t-test (single vs multiple mutations)" in results.omitted
	assert "omitted" in results.report


def test_analysis_is_deterministic(filename_competition, filename_mic):
	first = FitnessCostAnalysis().run(filename_competition, filename_mic)
	second = FitnessCostAnalysis().run(filename_competition, filename_mic)

	pandas.testing.assert_frame_equal(first.summary_table, second.summary_table)
	pandas.testing.assert_frame_equal(first.combined_table, second.combined_table)
	assert first.report == second.report


def test_output_files(filename_competition, filename_mic, tmp_path):
	output_folder = tmp_path / "output"
	runfitness.main([
		str(filename_competition), str(filename_mic),
		'--output', str(output_folder),
		'--multiple-mutations', 'S3,S4',
		'--reference', 'ANC'
	])
	expected_data = ['fitness.tsv', 'normalized_fitness.tsv', 'strain_summary.tsv', 'combined.tsv', 'statistics.tsv', 'anova.tsv',
		'regression.txt', 'tukey.tsv', 'tukeyhsdresults.json']
	expected_figures = ['correlation.png', 'correlation.svg', 'strainfitness.png', 'strainfitness.svg', 'qq.png', 'qq.svg']

	assert (output_folder / "report.txt").exists()
	for filename in expected_data:
		assert (output_folder / "data" / filename).exists(), filename
	for filename in expected_figures:
		assert (output_folder / "figures" / filename).exists(), filename

	statistics = pandas.read_csv(output_folder / "data" / "statistics.tsv", sep = "\t")
	assert len(statistics) == 8

	tukey = json.loads((output_folder / "data" / "tukeyhsdresults.json").read_text())
	assert tukey["groupsunique"] == ["S1", "S2", "S3", "S4"]
	tukey_table = pandas.read_csv(output_folder / "data" / "tukey.tsv", sep = "\t")
	assert len(tukey_table) == 6
	report = (output_folder / "report.txt").read_text()
	assert report.startswith("One-way ANOVA")
	assert "Pooled variance (residual mean square)" in report


def test_undefined_mic_values_are_not_correlated(filename_competition, mic_table):
	mic_table["MIC_daughter"] = mic_table["MIC_daughter"].astype(object)
	mic_table.loc[0, "MIC_daughter"] = "ND"
	results = FitnessCostAnalysis().run(filename_competition, mic_table)

	for column in ["log2_mic_daughter", "fold_change"]:
		correlation = results.correlations[column]
		assert math.isfinite(correlation.statistic)
		assert correlation.df == 1


def test_missing_file_stops_the_run(filename_mic, tmp_path):
	with pytest.raises(SystemExit):
		runfitness.main([str(tmp_path / "missing.tsv"), str(filename_mic), '--output', str(tmp_path / "output")])


def test_create_parser():
	args = runfitness.create_parser(['competition.tsv', 'mic.tsv', '--reference', 'ANC, REF', '--pooled-variance', '0.00441'])

	assert args.reference == ['ANC', 'REF']
	assert args.multiple_mutations is None
	assert args.pooled_variance == 0.00441
	assert args.alpha == 0.05
