"""
Tooling for LETOR / SVM-Rank ranking datasets.

- `letor.data` reads and writes records and groups them by query.
- `letor.split` partitions records into train/test/validation subsets or
  cross-validation folds without ever splitting a query group.
- `letor.train` and `letor.transform` are thin adapters over LightGBM,
  scikit-learn and pandas used by the command line.
"""

from letor.errors import ConfigurationError, EmptyInputError, FormatError, LetorError, OperationCancelled

__version__ = "0.1.0"

__all__ = [
    "ConfigurationError",
    "EmptyInputError",
    "FormatError",
    "LetorError",
    "OperationCancelled",
]
