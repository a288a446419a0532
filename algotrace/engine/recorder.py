"""
recorder.py — Run Recorder & Analytics
========================================
Runs one algorithm to completion exactly once, keeps the resulting trace
and computes the numbers an analytics panel shows.

Usage:
    rec = Recorder()
    rec.run("dijkstra", weighted_demo(), source="A", target="F")
    rec.metrics                       # RunMetrics
    rec.export()                      # JSON-ready snapshot of the run
    player.load(rec.trace)            # hand the trace over for playback
"""

import logging
import time
from collections import Counter
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional

from algotrace.algorithms import generate_trace, get_algorithm
from algotrace.algorithms.step import Trace
from algotrace.engine.serialize import to_jsonable, trace_to_list
from algotrace.errors import InvalidInputError


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Metrics dataclass — what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:      str            = ""
    algo_label:    str            = ""
    total_steps:   int            = 0          # number of Steps yielded
    wall_time_ms:  float          = 0.0        # time to generate the whole trace
    outcome:       str            = ""         # kind of the terminal step
    kinds:         Dict[str, int] = field(default_factory=dict)   # step kind → count
    path_length:   int            = 0          # edges / moves on the final path, if any


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        trace   : Full tuple of Steps from the run.
        metrics : RunMetrics for the run (None before `run`).
        params  : The parameters the run was started with.
    """

    def __init__(self, max_steps: Optional[int] = None):
        self.trace:     Trace                = ()
        self.metrics:   Optional[RunMetrics] = None
        self.params:    Dict[str, Any]       = {}
        self.max_steps: Optional[int]        = max_steps

        self._algo_key:  str = ""
        self._structure: Any = None

    # ------------------------------------------------------------------
    # Run
    # ------------------------------------------------------------------
    def run(self, algo_key: str, structure: Any = None, **params) -> RunMetrics:
        """
        Generate the full trace for `algo_key`; raises on invalid input.
        The previous run is discarded first, so a failed run leaves nothing.
        """
        self.clear()
        info = get_algorithm(algo_key)
        if info is None:
            raise InvalidInputError(f"Unknown algorithm {algo_key!r}")

        started = time.perf_counter()
        trace = generate_trace(algo_key, structure, max_steps=self.max_steps, **params)
        wall_ms = (time.perf_counter() - started) * 1000

        self._algo_key  = algo_key
        self._structure = structure
        self.params     = dict(params)
        self.trace      = trace
        self.metrics    = self._compute_metrics(info.label, wall_ms)
        logger.debug("Recorded %s: %d step(s) in %.2f ms", algo_key, len(trace), wall_ms)
        return self.metrics

    def clear(self) -> None:
        self.trace      = ()
        self.metrics    = None
        self.params     = {}
        self._algo_key  = ""
        self._structure = None

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        structure = self._structure
        if hasattr(structure, "to_dict"):
            structure = structure.to_dict()
        return {
            "algo_key":  self._algo_key,
            "params":    to_jsonable(self.params),
            "structure": to_jsonable(structure),
            "metrics":   asdict(self.metrics) if self.metrics else {},
            "steps":     trace_to_list(self.trace),
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, label: str, wall_ms: float) -> RunMetrics:
        last = self.trace[-1] if self.trace else None
        path = getattr(last.payload, "path", ()) if last else ()
        return RunMetrics(
            algo_key=self._algo_key,
            algo_label=label,
            total_steps=len(self.trace),
            wall_time_ms=round(wall_ms, 2),
            outcome=last.kind if last else "",
            kinds=dict(Counter(s.kind for s in self.trace)),
            path_length=len(path) - 1 if len(path) > 1 else 0,
        )
