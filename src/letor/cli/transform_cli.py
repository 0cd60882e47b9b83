from __future__ import annotations

import argparse
from pathlib import Path

from letor.cli.console import console, print_options, print_status
from letor.data.io import save_records
from letor.transform.csv_to_letor import default_output_paths, save_feature_map, transform_csv
from letor.utils.config import Config


def _separator(text: str) -> str:
    text = "\t" if text in ("\\t", "tab") else text
    if len(text) != 1:
        raise argparse.ArgumentTypeError(f"separator must be a single character, got {text!r}")
    return text


def add_parser(subparsers, cfg: Config) -> argparse.ArgumentParser:
    ap = subparsers.add_parser(
        "transform",
        help="Transform a CSV data set file of features into a LETOR dataset.",
        description="Transform a CSV data set file of features into a LETOR dataset.",
    )
    ap.add_argument(
        "-i", "--input", type=str, required=True,
        help="Path to the input dataset. It must start with a header row unless --headers is given.",
    )
    ap.add_argument(
        "-o", "--output", type=str, default=None,
        help="Path to the output LETOR dataset. [default: <input name>-letor.txt in the current directory]",
    )
    ap.add_argument(
        "--headers", type=str, default=None,
        help="File whose first line holds the column names, separated like the input.",
    )
    ap.add_argument(
        "--separator", type=_separator, default=_separator(cfg.TRANSFORM.SEPARATOR),
        help="Column separator character. Use '\\t' for tab. [default: tab]",
    )
    ap.add_argument(
        "-l", "--label-column", "--label", dest="label_column", default=cfg.TRANSFORM.LABEL_COLUMN,
        help="Name of the label column (unsigned integers).",
    )
    ap.add_argument(
        "-q", "--query-id-column", "--query", dest="query_id_column", default=cfg.TRANSFORM.QUERY_ID_COLUMN,
        help="Name of the query id column (unsigned integers).",
    )
    ap.add_argument(
        "-d", "--description-column", "--description", dest="description_column",
        default=cfg.TRANSFORM.DESCRIPTION_COLUMN,
        help="Name of the description column.",
    )
    ap.add_argument(
        "-f", "--feature-column", "--feature", dest="feature_columns", action="append", default=None,
        help="Name of a feature column, repeatable. [default: every other column]",
    )
    ap.set_defaults(handler=run)
    return ap


def run(args: argparse.Namespace, cfg: Config) -> int:
    default_output, features_output = default_output_paths(args.input)
    output = Path(args.output) if args.output else default_output

    print_options(
        {
            "Input data path": args.input,
            "Output data path": output,
            "Column separator": "\\t" if args.separator == "\t" else args.separator,
            "Headers file": args.headers,
            "Label column": args.label_column,
            "QueryId column": args.query_id_column,
            "Description column": args.description_column,
            "Feature columns": ",".join(args.feature_columns) if args.feature_columns else None,
        }
    )

    with console.status("Loading input data...", spinner="dots") as status:
        result = transform_csv(
            args.input,
            separator=args.separator,
            headers=args.headers,
            label_column=args.label_column,
            query_id_column=args.query_id_column,
            description_column=args.description_column,
            feature_columns=args.feature_columns,
        )
        status.update(f"Saving data to {output}...")
        save_records(output, result.records)
        save_feature_map(result.feature_names, args.input, features_output)

    print_status(f"{len(result.records)} records -> {output}")
    print_status(f"{len(result.feature_names)} feature names -> {features_output}")
    return 0
