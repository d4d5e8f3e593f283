"""
Host-side helpers for the payout breakdown command line.

Nothing in parsing, grouping or reconciliation calls these; they only
prepare where logs and saved breakdowns go.
"""

import os
import pathlib
import logging

logger = logging.getLogger(__name__)

DEFAULT_LOG_FILE = 'payout_breakdown.log'
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
VALID_DIR_TYPES = ['logs', 'output', 'data']


def resolve_log_file(log_file=None):
    """Log file path: explicit argument, else LOG_FILE, else payout_breakdown.log."""
    return str(log_file or os.getenv('LOG_FILE') or DEFAULT_LOG_FILE)


def setup_logging(debug=False, log_level='info', log_file=None):
    """Send the tool's logs to a file and the console.

    pandas ParserWarnings raised while reading an export are routed into the
    same log through the py.warnings logger.

    Args:
        debug (bool): Force DEBUG level
        log_level (str): Level name used when debug is False
        log_file (str, optional): Overrides LOG_FILE

    Returns:
        str: Path of the log file
    """
    level = logging.DEBUG if debug else getattr(logging, log_level.upper(), logging.INFO)

    log_file = resolve_log_file(log_file)
    pathlib.Path(log_file).parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            logging.StreamHandler()
        ]
    )
    logging.captureWarnings(True)

    logger.debug(f"Logging to {log_file} at level {logging.getLevelName(level)}")
    return log_file


def ensure_directory(dir_type, base_dir=None):
    """Create and return a working directory for saved breakdowns or logs.

    Args:
        dir_type (str): One of 'logs', 'output', 'data'
        base_dir (str or Path, optional): Parent directory, default DATA_DIR
            or the current directory

    Returns:
        pathlib.Path: Path to the directory

    Raises:
        ValueError: If dir_type is invalid
    """
    if dir_type not in VALID_DIR_TYPES:
        raise ValueError(f"Invalid directory type: {dir_type}. Expected one of: {VALID_DIR_TYPES}")

    base = pathlib.Path(base_dir or os.getenv('DATA_DIR') or os.getcwd())
    dir_path = base / dir_type
    dir_path.mkdir(parents=True, exist_ok=True)
    return dir_path
