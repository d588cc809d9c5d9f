from pathlib import Path

import matplotlib

matplotlib.use('Agg')

import pandas
import pytest

folder_data = Path(__file__).parent / "data"


@pytest.fixture
def filename_competition() -> Path:
	return folder_data / "competition.tsv"


@pytest.fixture
def filename_mic() -> Path:
	return folder_data / "mic.tsv"


@pytest.fixture
def competition_table(filename_competition) -> pandas.DataFrame:
	return pandas.read_csv(filename_competition, sep = "\t")


@pytest.fixture
def mic_table(filename_mic) -> pandas.DataFrame:
	return pandas.read_csv(filename_mic, sep = "\t")
