"""
engine/
-------
Scheduling & recording layer.

    from engine import Controller, Recorder
"""

from engine.controller import (
    Controller, AlgorithmStatus, Granularity, InvalidTransitionError,
    SPEED_PRESETS, RUN_TO_COMPLETION, SINGLE_STEP,
)
from engine.recorder import Recorder, RunMetrics

__all__ = [
    "Controller",
    "AlgorithmStatus",
    "Granularity",
    "InvalidTransitionError",
    "SPEED_PRESETS",
    "RUN_TO_COMPLETION",
    "SINGLE_STEP",
    "Recorder",
    "RunMetrics",
]
