import logging
import sys
import typing as t

LOGGER_NAME = "cdc_audit"


def verbosity_to_level(verbosity: int) -> int:
    """
    Maps syslog-style verbosity (3 = errors only, 4 = warnings, 6 = info,
    7 = debug) onto a logging level.
    """
    if verbosity >= 7:
        return logging.DEBUG
    if verbosity >= 6:
        return logging.INFO
    if verbosity >= 4:
        return logging.WARNING
    if verbosity >= 3:
        return logging.ERROR
    return logging.CRITICAL


def setup_logging(verbosity: int, log_file: t.Optional[str] = None) -> logging.Logger:
    """
    Routes the package's log records to `log_file`, or to stdout when None,
    replacing any handler installed by an earlier call.

    Raises OSError when the log file cannot be opened.
    """
    handler: logging.Handler
    if log_file:
        handler = logging.FileHandler(log_file, mode="w", encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(levelname)s %(message)s"))

    logger = logging.getLogger(LOGGER_NAME)
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()
    logger.addHandler(handler)
    logger.setLevel(verbosity_to_level(verbosity))
    return logger
