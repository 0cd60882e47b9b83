import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from letor.utils.config import Config


def setup_logging(cfg: Config) -> None:
    level = getattr(logging, str(cfg.LOGGING.LEVEL).upper(), logging.INFO)
    logging.basicConfig(level=level, format=cfg.LOGGING.FORMAT)


def write_message_to_log_file(message: str, cfg: Optional[Config] = None) -> None:
    """Appends a timestamped message to the configured log file."""
    cfg = cfg or Config(load=True)
    if not cfg.LOG_PATH:
        return

    log_path = Path(cfg.LOG_PATH)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    with open(log_path, 'a', encoding="utf-8") as log_file:
        timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        log_file.write(f"[{timestamp}]  {message}\n")
