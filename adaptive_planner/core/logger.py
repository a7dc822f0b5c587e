"""
Logging setup shared by the API server and the CLI
"""

import logging
from pathlib import Path
from typing import List, Optional

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(
    log_level: str = "INFO", log_file: Optional[str] = "logs/adaptive_planner.log"
) -> None:
    """
    Configure root logging

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        log_file: log file path, None for console output only
    """
    handlers: List[logging.Handler] = [logging.StreamHandler()]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.insert(0, logging.FileHandler(log_path, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )
