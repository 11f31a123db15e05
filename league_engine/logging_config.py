"""Handlers for the league_engine logger tree, attached by the CLI."""

import logging
import sys
from datetime import datetime
from pathlib import Path

CONSOLE_FORMAT = '%(levelname)s: %(message)s'
FILE_FORMAT = '%(asctime)s %(levelname)-7s %(name)s: %(message)s'


def setup_logging(
    level: int = logging.INFO,
    log_to_file: bool = False,
    log_dir: Path = Path('logs'),
) -> logging.Logger:
    """
    Send league_engine records to stderr, and also to a timestamped file
    under log_dir when log_to_file is set.

    Calling it again replaces the handlers from the previous call. stdout is
    left alone for the CLI's JSON output.
    """
    package_logger = logging.getLogger('league_engine')
    package_logger.setLevel(level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(CONSOLE_FORMAT))
    package_logger.addHandler(console)

    if log_to_file:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / f'league_engine_{datetime.now():%Y%m%d_%H%M%S}.log'
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt='%Y-%m-%d %H:%M:%S'))
        package_logger.addHandler(file_handler)
        package_logger.debug(f'Logging to {log_path}')

    return package_logger
