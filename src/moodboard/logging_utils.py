"""
Shared logger for the moodboard compositor.

Every module logs through the ``moodboard`` logger created here, so the
CLI can change verbosity in one place. Keeping the logger in its own
module also keeps geometry, pan and export free of import cycles.
"""

import logging

_DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
_VERBOSE_FORMAT = "%(asctime)s [%(levelname)s] %(module)s: %(message)s"


def setup_logger(
        name: str = __name__,
        level: int = logging.INFO,
        formatter: logging.Formatter | None = None,
        handler: logging.Handler | None = None,
) -> logging.Logger:
    """
    Return a named logger with one stream handler attached.

    Calling it again for the same name returns the same logger without
    stacking handlers.

    Args:
        name: Logger name.
        level: Initial logging level.
        formatter: Optional custom formatter.
        handler: Optional custom handler.

    Returns:
        The configured logger.

    """
    logger_instance = logging.getLogger(name)
    logger_instance.setLevel(level)
    if not logger_instance.handlers:
        handler = handler or logging.StreamHandler()
        handler.setFormatter(formatter or logging.Formatter(_DEFAULT_FORMAT))
        logger_instance.addHandler(handler)
        logger_instance.propagate = False
    return logger_instance


def set_verbosity(*, verbose: bool) -> None:
    """
    Switch the shared logger between INFO and DEBUG.

    Verbose output also names the emitting module, which helps when
    following a pan session or an export through several modules.
    """
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    fmt = _VERBOSE_FORMAT if verbose else _DEFAULT_FORMAT
    for handler in logger.handlers:
        handler.setFormatter(logging.Formatter(fmt))


logger = setup_logger("moodboard")
