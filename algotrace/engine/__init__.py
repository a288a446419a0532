"""
engine/
-------
Playback & recording layer.

    from algotrace.engine import Player, Recorder, step_to_dict
"""

from algotrace.engine.player    import Player, PlayerState
from algotrace.engine.scheduler import ThreadingScheduler, ManualScheduler
from algotrace.engine.recorder  import Recorder, RunMetrics
from algotrace.engine.serialize import step_to_dict, trace_to_list, to_jsonable

__all__ = [
    "Player",             "PlayerState",
    "ThreadingScheduler", "ManualScheduler",
    "Recorder",           "RunMetrics",
    "step_to_dict",       "trace_to_list",    "to_jsonable",
]
