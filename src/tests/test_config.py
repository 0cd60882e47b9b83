import json
import os
import tempfile
import unittest
from pathlib import Path

import yaml
from letor.utils.config import DEFAULTS, Config
from letor.utils.logger import write_message_to_log_file

BASE_CONFIG = Path(__file__).resolve().parents[2] / "configs" / "base.yaml"


class TestConfig(unittest.TestCase):
    def test_parse_base_config(self):
        cfg = Config(load=True, path=str(BASE_CONFIG))
        self.assertIsNotNone(cfg)
        with open(BASE_CONFIG, 'r') as f:
            yaml_config = yaml.load(f.read(), Loader=yaml.SafeLoader)

        self.assertEqual(cfg.SPLIT.TEST_FRACTION, yaml_config['SPLIT']['TEST_FRACTION'])
        self.assertEqual(cfg.FOLD.FOLDS, yaml_config["FOLD"]["FOLDS"])
        self.assertEqual(cfg.TRANSFORM.SEPARATOR, "\t")
        self.assertEqual(cfg.TRAIN.DCG_TRUNCATION_LEVEL, yaml_config["TRAIN"]["DCG_TRUNCATION_LEVEL"])

    def test_update_config(self):
        cfg = Config(load=True, path=str(BASE_CONFIG))
        new_config = {"SPLIT": {"SEED": 17}}
        self.assertIsNotNone(cfg.SPLIT.TEST_FRACTION)
        cfg.update_dict(new_config)
        self.assertEqual(cfg.SPLIT.SEED, 17)
        self.assertEqual(cfg.SPLIT.TEST_FRACTION, 0.1)

    def test_missing_keys_fall_back_to_defaults(self):
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "partial.yaml")
            with open(path, "w") as f:
                f.write("FOLD:\n  FOLDS: 3\n")
            cfg = Config(load=True, path=path)
        self.assertEqual(cfg.FOLD.FOLDS, 3)
        self.assertIsNone(cfg.FOLD.SEED)
        self.assertEqual(cfg.TRAIN.ITERATIONS, DEFAULTS["TRAIN"]["ITERATIONS"])
        self.assertEqual(cfg.cfg_file, str(Path(path).resolve()))

    def test_defaults_are_not_mutated(self):
        cfg = Config(load=True, path=str(BASE_CONFIG))
        cfg.update_dict({"TRAIN": {"ITERATIONS": 1}})
        self.assertEqual(DEFAULTS["TRAIN"]["ITERATIONS"], 100)

    def test_explicit_missing_path(self):
        with self.assertRaises(FileNotFoundError):
            Config(load=True, path="/nonexistent/letor.yaml")

    def test_non_mapping_root(self):
        with tempfile.TemporaryDirectory() as td:
            path = os.path.join(td, "list.yaml")
            with open(path, "w") as f:
                f.write("- 1\n- 2\n")
            with self.assertRaises(TypeError):
                Config(load=True, path=path)

    def test_deep_copy_is_independent(self):
        cfg = Config(load=True, path=str(BASE_CONFIG))
        copied = cfg.deep_copy()
        copied.update_dict({"FOLD": {"FOLDS": 9}})
        self.assertEqual(copied.FOLD.FOLDS, 9)
        self.assertEqual(cfg.FOLD.FOLDS, 5)
        self.assertEqual(json.loads(cfg.dump())["FOLD"]["FOLDS"], 5)

    def test_without_loading(self):
        cfg = Config(load=False, cfg_dict={"A": {"B": 1}})
        self.assertEqual(cfg.A.B, 1)
        self.assertIsNone(cfg.get("MISSING"))
        self.assertIsNone(cfg.cfg_file)


class TestLogFile(unittest.TestCase):
    def test_appends_timestamped_lines(self):
        with tempfile.TemporaryDirectory() as td:
            log_path = os.path.join(td, "logs", "letor.log")
            cfg = Config(load=False, cfg_dict={"LOG_PATH": log_path})
            write_message_to_log_file("first", cfg)
            write_message_to_log_file("second", cfg)
            with open(log_path) as f:
                lines = f.read().splitlines()
        self.assertEqual(len(lines), 2)
        self.assertTrue(lines[0].startswith("["))
        self.assertTrue(lines[1].endswith("]  second"))

    def test_disabled_without_path(self):
        cfg = Config(load=False, cfg_dict={"LOG_PATH": None})
        write_message_to_log_file("ignored", cfg)


if __name__ == "__main__":
    unittest.main()
