from __future__ import annotations

import argparse

from letor.cli.console import console, print_options, print_status, resolve_seed
from letor.data.io import LetorFile
from letor.split.partition import fold_records, validate_folds
from letor.split.persist import fold_output_dir, persist_folds
from letor.utils.config import Config


def add_parser(subparsers, cfg: Config) -> argparse.ArgumentParser:
    ap = subparsers.add_parser(
        "fold",
        help="Split input training data into K cross-validation folds of train/test data.",
        description="Split input training data into K cross-validation folds of train/test data.",
    )
    ap.add_argument(
        "-s", "--seed", type=int, default=cfg.FOLD.SEED,
        help="Seed for the random fold assignment. [default: a random value]",
    )
    ap.add_argument(
        "-i", "--input", type=str, required=True,
        help="Path to the input training data in LETOR / SVM-Rank format.",
    )
    ap.add_argument(
        "-f", "--folds", type=int, default=cfg.FOLD.FOLDS,
        help="Number of cross-validation folds. Must be greater than 1.",
    )
    ap.add_argument(
        "-o", "--output-dir", type=str, default=cfg.FOLD.OUTPUT_DIR,
        help="Output directory for the fold<N>/ directories. [default: current directory]",
    )
    ap.set_defaults(handler=run)
    return ap


def run(args: argparse.Namespace, cfg: Config) -> int:
    seed = resolve_seed(args.seed)
    print_options(
        {
            "Seed": seed,
            "Input data path": args.input,
            "Number of folds": args.folds,
            "Output Directory": args.output_dir,
        }
    )
    validate_folds(args.folds)

    with console.status("Loading training data...", spinner="dots") as status:
        records = list(LetorFile(args.input))
        status.update(f"Splitting training data into {args.folds} folds...")
        folds = fold_records(records, args.folds, seed=seed)
        status.update("Saving folds...")
        persist_folds(folds, args.output_dir)

    for fold in folds:
        print_status(
            f"fold {fold.number}: train={len(fold.train)}, test={len(fold.test)} -> "
            f"{fold_output_dir(args.output_dir, fold)}"
        )
    return 0
