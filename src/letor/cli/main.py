from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

import yaml

from letor.cli import fold_cli, split_cli, train_cli, transform_cli
from letor.cli.console import print_error
from letor.errors import LetorError
from letor.utils.config import Config
from letor.utils.logger import setup_logging, write_message_to_log_file

logger = logging.getLogger(__name__)

COMMANDS = (train_cli, split_cli, fold_cli, transform_cli)


def _config_path(argv: Sequence[str]) -> Optional[str]:
    pre = argparse.ArgumentParser(add_help=False)
    pre.add_argument("--config", type=str, default=None)
    known, _ = pre.parse_known_args(argv)
    return known.config


def build_parser(cfg: Config) -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="letor",
        description="Split, fold, transform and train on LETOR / SVM-Rank ranking datasets.",
    )
    ap.add_argument("--config", type=str, default=None, help="Path to a yaml config file.")
    subparsers = ap.add_subparsers(dest="command", required=True)
    for command in COMMANDS:
        command.add_parser(subparsers, cfg)
    return ap


def main(argv: Optional[Sequence[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    try:
        cfg = Config(load=True, path=_config_path(argv))
    except (FileNotFoundError, TypeError, yaml.YAMLError) as e:
        print_error(f"Could not load config: {e}")
        return 1

    setup_logging(cfg)
    args = build_parser(cfg).parse_args(argv)

    try:
        code = args.handler(args, cfg)
    except LetorError as e:
        logger.error(f"{args.command} failed: {e}")
        print_error(str(e))
        return 1
    except FileNotFoundError as e:
        print_error(f"File not found: {e.filename or e}")
        return 1
    except KeyboardInterrupt:
        print_error("Interrupted, no output written.")
        return 1

    write_message_to_log_file(f"letor {' '.join(argv)} -> exit {code}", cfg)
    return code


if __name__ == "__main__":
    sys.exit(main())
