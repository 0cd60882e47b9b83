from __future__ import annotations

import argparse

from letor.cli.console import console, print_options, print_status, resolve_seed
from letor.data.io import LetorFile
from letor.split.partition import split_records, validate_fractions
from letor.split.persist import persist_split
from letor.utils.config import Config


def add_parser(subparsers, cfg: Config) -> argparse.ArgumentParser:
    ap = subparsers.add_parser(
        "split",
        help="Split input training data to create train/test/validation data.",
        description="Split input training data to create train/test/validation data. "
        "Whole query groups are assigned to one subset.",
    )
    ap.add_argument(
        "-s", "--seed", type=int, default=cfg.SPLIT.SEED,
        help="Seed for the random group assignment. [default: a random value]",
    )
    ap.add_argument(
        "-i", "--input", type=str, required=True,
        help="Path to the input training data in LETOR / SVM-Rank format.",
    )
    ap.add_argument(
        "-f", "--test-fraction", type=float, default=cfg.SPLIT.TEST_FRACTION,
        help="Fraction of query groups to use for test data, in [0, 1).",
    )
    ap.add_argument(
        "-v", "--validation-fraction", type=float, default=cfg.SPLIT.VALIDATION_FRACTION,
        help="Fraction of query groups to use for validation data, in [0, 1).",
    )
    ap.set_defaults(handler=run)
    return ap


def run(args: argparse.Namespace, cfg: Config) -> int:
    seed = resolve_seed(args.seed)
    print_options(
        {
            "Seed": seed,
            "Input data path": args.input,
            "Test fraction": args.test_fraction,
            "Validation fraction": args.validation_fraction,
        }
    )
    validate_fractions(args.test_fraction, args.validation_fraction)

    with console.status("Loading training data...", spinner="dots") as status:
        records = list(LetorFile(args.input))
        status.update("Splitting training data...")
        split = split_records(records, args.test_fraction, args.validation_fraction, seed=seed)
        status.update("Saving split data...")
        written = persist_split(split, args.input)

    for name, records in split.subsets():
        print_status(f"{name}: {len(records)} records, {len(split.groups_in(name))} queries -> {written[name]}")
    return 0
