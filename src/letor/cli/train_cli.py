from __future__ import annotations

import argparse

from letor.cli.console import console, print_metrics, print_options, print_status, resolve_seed
from letor.data.io import LetorFile
from letor.utils.config import Config


def add_parser(subparsers, cfg: Config) -> argparse.ArgumentParser:
    ap = subparsers.add_parser(
        "train",
        help="Train a LightGBM ranker and evaluate it on test (and validation) data.",
        description="Train a LightGBM lambdarank model on LETOR data and report DCG/NDCG.",
    )
    ap.add_argument(
        "-s", "--seed", type=int, default=cfg.TRAIN.SEED,
        help="Seed passed to LightGBM. [default: a random value]",
    )
    ap.add_argument("-t", "--train", type=str, required=True, help="Path to the LETOR training data.")
    ap.add_argument("-e", "--test", type=str, required=True, help="Path to the LETOR test data.")
    ap.add_argument("-v", "--validation", type=str, default=None, help="Path to the LETOR validation data.")
    ap.add_argument("-m", "--model", type=str, default=None, help="Path to save the trained model to.")
    ap.add_argument(
        "-l", "--leaves", type=int, default=cfg.TRAIN.LEAVES,
        help="Maximum number of leaves in one tree.",
    )
    ap.add_argument(
        "-n", "--min-examples", type=int, default=cfg.TRAIN.MIN_EXAMPLES,
        help="Minimal number of data points required to form a new tree leaf.",
    )
    ap.add_argument(
        "-r", "--learning-rate", type=float, default=cfg.TRAIN.LEARNING_RATE,
        help="The learning rate.",
    )
    ap.add_argument(
        "-i", "--iterations", type=int, default=cfg.TRAIN.ITERATIONS,
        help="Number of boosting iterations (trees).",
    )
    ap.add_argument(
        "-d", "--dcg-truncation-level", type=int, default=cfg.TRAIN.DCG_TRUNCATION_LEVEL,
        help="Maximum truncation level for computing (N)DCG.",
    )
    ap.set_defaults(handler=run)
    return ap


def run(args: argparse.Namespace, cfg: Config) -> int:
    # LightGBM and scikit-learn are only imported when training.
    from letor.train.metrics import validate_truncation_level
    from letor.train.trainer import TrainerConfig, evaluate_ranker, fit_ranker, save_model

    validate_truncation_level(args.dcg_truncation_level)
    train_file = LetorFile(args.train)
    # Every subset must match the width of the first training record.
    num_features = train_file.num_features()
    seed = resolve_seed(args.seed)

    print_options(
        {
            "Seed": seed,
            "Train data path": args.train,
            "Test data path": args.test,
            "Validation data path": args.validation,
            "Model output path": args.model,
            "Number of leaves": args.leaves,
            "Minimum examples": args.min_examples,
            "Learning rate": args.learning_rate,
            "Number of iterations": args.iterations,
            "(N)DCG truncation level": args.dcg_truncation_level,
            "Features count": num_features,
        }
    )

    trainer_cfg = TrainerConfig(
        iterations=args.iterations,
        leaves=args.leaves,
        min_examples=args.min_examples,
        learning_rate=args.learning_rate,
        seed=seed,
    )
    with console.status("Training the model on the training data...", spinner="dots"):
        model = fit_ranker(train_file, trainer_cfg, num_features)

    if args.validation:
        with console.status("Loading and evaluating on the validation data...", spinner="dots"):
            metrics = evaluate_ranker(model, LetorFile(args.validation), args.dcg_truncation_level, num_features)
        print_metrics(metrics, "Validation")

    with console.status("Loading and evaluating on the test data...", spinner="dots"):
        metrics = evaluate_ranker(model, LetorFile(args.test), args.dcg_truncation_level, num_features)
    print_metrics(metrics, "Test")

    if args.model:
        with console.status("Saving the model...", spinner="dots"):
            path = save_model(model, args.model)
        print_status(f"Model saved to {path}")
    return 0
