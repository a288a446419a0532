"""
config.py — Application configuration
======================================
Plain upper-case attributes so Flask can load them with
``app.config.from_object(DefaultConfig)``.  Every key can be overridden from
the environment with an ``ALGOTRACE_`` prefix, e.g.

    ALGOTRACE_DEFAULT_SPEED_MS=150
    ALGOTRACE_LOG_LEVEL=DEBUG

(Flask's ``from_prefixed_env`` parses the values as JSON when it can.)
"""

import logging
from typing import Dict


# ---------------------------------------------------------------------------
# Speed presets (milliseconds per step)
# ---------------------------------------------------------------------------
SPEED_PRESETS: Dict[str, int] = {
    "slow":   1000,   # teaching mode
    "medium": 400,
    "fast":   150,    # demo mode
    "turbo":  50,
}


class DefaultConfig:
    DEFAULT_SPEED_MS = SPEED_PRESETS["medium"]
    MIN_SPEED_MS     = 20
    MAX_SPEED_MS     = 5000
    # Hard guard against a runaway generator (e.g. a huge N-Queens board).
    MAX_TRACE_STEPS  = 200_000
    LOG_LEVEL        = "INFO"
    # Live player sessions kept in memory; the least recently used is dropped.
    MAX_SESSIONS     = 256
    SPEED_PRESETS    = SPEED_PRESETS


LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str = "INFO") -> None:
    """Install a basic root handler.  Safe to call more than once."""
    logging.basicConfig(level=getattr(logging, str(level).upper(), logging.INFO), format=LOG_FORMAT)


__all__ = ["DefaultConfig", "SPEED_PRESETS", "configure_logging"]
