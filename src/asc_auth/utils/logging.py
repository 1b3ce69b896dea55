import logging
import os
import sys

ROOT_LOGGER = "asc_auth"

def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER)
    if not root.handlers:
        # stderr keeps CLI stdout (tokens, JSON) machine-readable
        h = logging.StreamHandler(sys.stderr)
        h.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s %(message)s"))
        root.addHandler(h)
        root.setLevel(os.getenv("ASC_LOG_LEVEL", "INFO").upper())
    return root

def get_logger(name: str = ROOT_LOGGER) -> logging.Logger:
    """Logger under the ``asc_auth`` hierarchy; the shared handler is installed once."""
    root = _configure_root()
    if name == ROOT_LOGGER:
        return root
    if not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
