"""
algotrace
---------
Record an algorithm's run as an immutable list of Steps, then replay it.

    from algotrace.algorithms import generate_trace
    from algotrace.engine import Player
"""

__version__ = "0.1.0"
