"""
Logging setup for command line use. Library modules only create loggers.
"""

import logging
import sys


def setup_logging(level=logging.INFO, log_file=None):
    """
    Configure the `pose_offsets` package logger.

    Parameters
    ----------
    level : int, optional
        Logging level. The default is `logging.INFO`.
    log_file : str or None, optional
        If given, also write logs to this file. The default is None.

    Returns
    -------
    logging.Logger
        The configured package logger.
    """
    logger = logging.getLogger("pose_offsets")
    logger.setLevel(level)

    # repeated setup must not stack handlers
    if logger.handlers:
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
