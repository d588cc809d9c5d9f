import sys
from pathlib import Path
from typing import *

from loguru import logger

import analysis
import utilities
from validation import DataLoadError


def create_parser(args: List[str] = None):
	import argparse
	parser = argparse.ArgumentParser(description = "Calculates the fitness cost of antibiotic resistance and compares it to the MIC of each strain.")

	parser.add_argument(
		"competition",
		help = "A table of competition counts with the paired_ID, block, background, antibiotic, competitor_1, competitor_2, "
			   "comp1_d0, comp1_d3, comp2_d0, and comp2_d3 columns.",
		type = Path
	)
	parser.add_argument(
		"mic",
		help = "A table with the strain, MIC_parent, and MIC_daughter columns. An optional `nickname` column is used to label the figures.",
		type = Path
	)
	parser.add_argument(
		"--output",
		help = "The folder to save all of the output files. If not given, an output folder will be generated next to the competition table.",
		type = Path,
		default = None
	)
	parser.add_argument(
		"--antibiotic",
		help = "Only analyze competitions performed with this antibiotic.",
		type = str,
		default = None
	)
	parser.add_argument(
		"--reference",
		help = "The strain(s) used as the denominator of each (block, paired_ID) pair. Should be a comma-separated list. "
			   "Defaults to the strain matching the `background` column.",
		type = str,
		default = None
	)
	parser.add_argument(
		"--multiple-mutations",
		help = "The strains carrying more than one resistance mutation. Should be a comma-separated list.",
		type = str,
		default = None,
		dest = "multiple_mutations"
	)
	parser.add_argument(
		"--pooled-variance",
		help = "Use this value rather than the ANOVA residual mean square when calculating confidence intervals.",
		type = float,
		default = None,
		dest = "pooled_variance"
	)
	parser.add_argument(
		"--alpha",
		help = "The family-wise error rate of the tukey test.",
		type = float,
		default = 0.05
	)
	parser.add_argument(
		"--verbose",
		help = "Show trace-level log messages.",
		action = "store_true"
	)
	if args:
		args = parser.parse_args(args)
	else:
		args = parser.parse_args()
	args.reference = utilities.split_list(args.reference)
	args.multiple_mutations = utilities.split_list(args.multiple_mutations)
	return args


def main(args: List[str] = None) -> analysis.AnalysisResults:
	args = create_parser(args)
	if args.verbose:
		logger.remove()  # Need to remove the default sink so that the logger doesn't print messages twice.
		logger.add(sys.stderr, level = "TRACE")

	output_folder = args.output
	if output_folder is None:
		output_folder = args.competition.parent / f"fitnesscost.{utilities.get_run_label()}"
	logger.info(f"Saving output files to '{output_folder}'")

	workflow = analysis.FitnessCostAnalysis(
		reference_strains = args.reference,
		multiple_mutations = args.multiple_mutations,
		pooled_variance = args.pooled_variance,
		alpha = args.alpha,
		antibiotic = args.antibiotic
	)
	try:
		results = workflow.run(args.competition, args.mic, project_folder = output_folder)
	except DataLoadError as exception:
		logger.error(str(exception))
		raise SystemExit(1)
	return results


if __name__ == "__main__":
	main()
