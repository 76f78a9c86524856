"""
Detection Evaluation Script for SCC vs. binary-mask detectors

Scores the significant regions of an SCC estimation result (both directions)
and a binary detection mask against ground-truth ROIs on one slice.

Usage:
    # Single ROI table
    python evaluate_detection.py --scc SCCcomp.npz --mask binary.csv --roi ROItable_Region2_18.csv \
        --slice 35 --level 1 --first-group Pathological --second-group Control

    # Every ROItable_<region>_<number>.csv under a directory
    python evaluate_detection.py --scc SCCcomp.npz --mask binary.csv --roi-dir data/roiTables \
        --regions Region2 Region3 --numbers 18 19 --level 1
"""

import argparse
from pathlib import Path

from config import get_default_config
from data import load_estimation_result, load_voxel_table
from eval import GroupOrder, get_dimensions
from pipelines import run_detection_comparison, run_configured_batch
from utils import log_message, setup_logging


def build_parser():
    parser = argparse.ArgumentParser(description='Evaluate SCC and binary-mask detection against ground-truth ROIs')
    parser.add_argument('--scc', type=str, default=None,
                        help='Path to SCC estimation result (.npz)')
    parser.add_argument('--mask', type=str, default=None,
                        help='Path to binary detection voxel table (.csv)')
    parser.add_argument('--roi', type=str, default=None,
                        help='Path to one ground-truth ROI voxel table (.csv); omit to run the ROI batch')
    parser.add_argument('--roi-dir', type=str, default=None,
                        help='Directory of ROItable_<region>_<number>.csv files (overrides config)')
    parser.add_argument('--regions', type=str, nargs='+', default=None,
                        help='Regions to load in batch mode (overrides config)')
    parser.add_argument('--numbers', type=str, nargs='+', default=None,
                        help='ROI numbers to load in batch mode (overrides config)')
    parser.add_argument('--region', type=str, default=None,
                        help='Region label for a single ROI table (defaults to ROI file stem)')
    parser.add_argument('--slice', type=int, default=None,
                        help='Z slice to evaluate (overrides config)')
    parser.add_argument('--level', type=int, required=True,
                        help='0-based confidence level index into the SCC alpha grid')
    parser.add_argument('--first-group', type=str, default=None,
                        help='Group passed first to the estimator')
    parser.add_argument('--second-group', type=str, default=None,
                        help='Group passed second to the estimator')
    parser.add_argument('--output-dir', type=str, default=None,
                        help='Base directory for run outputs (overrides config)')
    return parser


def main(argv=None):
    """Main evaluation function."""
    args = build_parser().parse_args(argv)

    # ===== CONFIGURATION =====
    config = get_default_config()
    if args.scc:
        config["SCC_RESULT_PATH"] = args.scc
    if args.mask:
        config["BINARY_MASK_PATH"] = args.mask
    if args.roi_dir:
        config["ROI_TABLE_DIR"] = args.roi_dir
    if args.regions:
        config["REGIONS"] = args.regions
    if args.numbers:
        config["ROI_NUMBERS"] = args.numbers
    if args.slice is not None:
        config["SLICE_INDEX"] = args.slice
    if args.output_dir:
        config["OUTPUT_DIR"] = args.output_dir
    config["CONFIDENCE_LEVEL_INDEX"] = args.level

    first, second = config["GROUP_ORDER"]
    group_order = GroupOrder(first=args.first_group or first, second=args.second_group or second)

    paths = setup_logging(config["OUTPUT_DIR"])
    log_file = paths["log_file"]

    log_message("=" * 60, log_file)
    log_message("SCC Detection - Evaluation", log_file)
    log_message("=" * 60, log_file)
    log_message(f"SCC result:  {config['SCC_RESULT_PATH']}", log_file)
    log_message(f"Binary mask: {config['BINARY_MASK_PATH']}", log_file)
    if args.roi:
        log_message(f"ROI table:   {args.roi}", log_file)
    else:
        log_message(f"ROI tables:  {config['ROI_TABLE_DIR']} "
                    f"(regions={config['REGIONS']}, numbers={config['ROI_NUMBERS']})", log_file)
    log_message(f"Slice:       {config['SLICE_INDEX']}", log_file)
    log_message(f"Level index: {config['CONFIDENCE_LEVEL_INDEX']}", log_file)
    log_message(f"Groups:      first={group_order.first}, second={group_order.second}", log_file)
    log_message("=" * 60, log_file)

    # ===== LOAD INPUTS =====
    estimation_result = load_estimation_result(config["SCC_RESULT_PATH"], index_base=config["INDEX_BASE"])
    mask_table = load_voxel_table(config["BINARY_MASK_PATH"])

    # ===== COMPARE DETECTORS =====
    if args.roi:
        roi_table = load_voxel_table(args.roi)
        dimensions = get_dimensions(roi_table)
        log_message(f"Grid: {dimensions.x_dim} x {dimensions.y_dim} ({dimensions.dim} voxels per slice)", log_file)
        results_df = run_detection_comparison(
            estimation_result, mask_table, roi_table, config, args.region or Path(args.roi).stem,
            group_order=group_order, dimensions=dimensions, log_file=log_file,
        )
    else:
        results_df = run_configured_batch(
            estimation_result, mask_table, config, group_order=group_order, log_file=log_file,
        )

    output_path = paths["table_dir"] / "metrics.csv"
    results_df.to_csv(output_path, index=False)

    log_message("\n" + results_df.to_string(index=False), log_file)
    log_message(f"\nSaved metrics to {output_path}", log_file)
    return results_df


if __name__ == "__main__":
    main()
