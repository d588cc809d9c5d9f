import datetime
from pathlib import Path
from typing import *


def checkdir(path: Union[str, Path]) -> Path:
	path = Path(path)
	if not path.exists():
		path.mkdir(parents = True)
	return path


def get_run_label() -> str:
	""" Generates the name of an output folder based on the current date and time."""
	current_date = datetime.datetime.now()
	date = str(current_date.date())
	time = current_date.time()
	time_string = f"{time.hour}_{time.minute}_{time.second}"

	label = date + 'T' + time_string
	return label


def split_list(value: Optional[str]) -> Optional[List[str]]:
	""" Splits a comma-separated commandline value. Ex. 'A,B' -> ['A', 'B']"""
	if value is None:
		return None
	return [i.strip() for i in value.split(',') if i.strip()]


def tukey_to_json(result) -> Dict[str, Any]:
	""" Converts TukeyHSDResults to a dictionary."""

	data = {
		'confint':      list(list(float(j) for j in i) for i in result.confint),
		'data':         list(float(i) for i in result.data),
		'df_total':     int(result.df_total),
		'groups':       list(str(i) for i in result.groups),
		'groupsunique': list(str(i) for i in result.groupsunique),
		'meandiffs':    list(float(i) for i in result.meandiffs),
		'pvalues':      list(float(i) for i in result.pvalues),
		'q_crit':       float(result.q_crit),
		'reject':       list(bool(i) for i in result.reject),
		'std_pairs':    list(float(i) for i in result.std_pairs),
		'variance':     float(result.variance)
	}
	return data
