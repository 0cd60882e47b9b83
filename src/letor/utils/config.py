from __future__ import annotations

import copy
import json
from pathlib import Path
from typing import Any, Optional

import yaml

DEFAULT_CONFIG_PATH = "configs/base.yaml"

# Used for any key the yaml file leaves out.
DEFAULTS: dict[str, Any] = {
    "LOG_PATH": "logs/letor.log",
    "LOGGING": {
        "LEVEL": "INFO",
        "FORMAT": "%(asctime)s %(levelname)s %(name)s: %(message)s",
    },
    "SPLIT": {
        "SEED": None,
        "TEST_FRACTION": 0.1,
        "VALIDATION_FRACTION": 0.0,
    },
    "FOLD": {
        "SEED": None,
        "FOLDS": 5,
        "OUTPUT_DIR": None,
    },
    "TRAIN": {
        "SEED": None,
        "ITERATIONS": 100,
        "LEAVES": None,
        "MIN_EXAMPLES": None,
        "LEARNING_RATE": None,
        "DCG_TRUNCATION_LEVEL": 10,
    },
    "TRANSFORM": {
        "SEPARATOR": "\t",
        "LABEL_COLUMN": "Label",
        "QUERY_ID_COLUMN": "QueryId",
        "DESCRIPTION_COLUMN": None,
    },
}


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively merge override into base (mutates base) and return base."""
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


class Config:
    """
    Toolkit config object.
    Loads configs/base.yaml on top of the built-in defaults and turns the keys
    into attributes, nested dicts becoming nested Config objects.
    """

    def __init__(
        self,
        load: bool = True,
        cfg_dict: Optional[dict[str, Any]] = None,
        path: Optional[str] = None,
    ):
        if load:
            cfg_dict = copy.deepcopy(DEFAULTS)
            cfg_path = self._resolve_cfg_path(path)
            if cfg_path is not None:
                with open(cfg_path, "r", encoding="utf-8") as f:
                    loaded = yaml.safe_load(f) or {}
                if not isinstance(loaded, dict):
                    raise TypeError(f"Config root must be a dict, got: {type(loaded)}")
                _deep_merge(cfg_dict, loaded)
            self.cfg_file = str(cfg_path) if cfg_path is not None else None
        else:
            self.cfg_file = None
            cfg_dict = cfg_dict or {}

        if not isinstance(cfg_dict, dict):
            raise TypeError(f"Config root must be a dict, got: {type(cfg_dict)}")

        self.cfg_dict: dict[str, Any] = cfg_dict
        self._refresh_attributes()

    def _refresh_attributes(self) -> None:
        def wrap(v: Any) -> Any:
            if isinstance(v, dict):
                return Config(load=False, cfg_dict=v)
            return v

        for k, v in self.cfg_dict.items():
            setattr(self, k, wrap(v))

    def _find_project_root(self, start: Path | str = __file__) -> Path:
        """Walk up from `start` to locate the directory containing pyproject.toml."""
        p = Path(start).resolve()
        for parent in (p, *p.parents):
            if (parent / "pyproject.toml").exists():
                return parent
        # Fallback: current working dir
        return Path.cwd().resolve()

    def _resolve_cfg_path(self, user_path: Optional[str]) -> Optional[Path]:
        """
        An explicit path must exist. Without one, configs/base.yaml under the
        project root is used when present, otherwise only the defaults apply.
        """
        root = self._find_project_root()
        if user_path is None:
            p = root / DEFAULT_CONFIG_PATH
            return p if p.exists() else None
        p = Path(user_path).expanduser()
        if not p.is_absolute():
            # relative to the working directory first, then to the project root
            p = p.resolve() if p.exists() else (root / p).resolve()
        else:
            p = p.resolve()
        if not p.exists():
            raise FileNotFoundError(f"Config file not found: {p}")
        return p

    def get(self, key: str, default: Any = None) -> Any:
        return getattr(self, key, default)

    def update_dict(self, cfg_dict: dict[str, Any]) -> None:
        """Deep-merge overrides into the existing config and refresh attributes."""
        if not isinstance(cfg_dict, dict):
            raise TypeError("update_dict expects a dict")
        _deep_merge(self.cfg_dict, cfg_dict)
        self._refresh_attributes()

    def dump(self) -> str:
        return json.dumps(self.cfg_dict, indent=2, ensure_ascii=False)

    def deep_copy(self) -> "Config":
        return copy.deepcopy(self)

    def __repr__(self) -> str:
        return f"{self.dump()}\n"
