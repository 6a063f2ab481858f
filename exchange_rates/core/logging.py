import logging
import sys
from typing import Optional, TextIO

_handler: Optional[logging.Handler] = None


def setup_logging(level: str = "INFO", stream: Optional[TextIO] = None) -> None:
    """Configure logging to output to stdout (or ``stream``) with proper formatting."""
    global _handler

    root_logger = logging.getLogger()
    if _handler is not None:
        # Calling again replaces the handler instead of stacking another one
        root_logger.removeHandler(_handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    root_logger.setLevel(level.upper())
    _handler = handler

    # Set lower log levels for some noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
