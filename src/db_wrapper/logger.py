"""Logger lookup for the db_wrapper modules; handlers are left to the host app."""

import logging


def get_logger(name: str = "DbWrapper") -> logging.Logger:
    """Return the stdlib logger called ``name``."""
    return logging.getLogger(name)
