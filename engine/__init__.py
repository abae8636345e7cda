"""
engine/
-------
Playback layer.

    from engine import PlaybackController, PlaybackState, ViewState
    from engine import ManualScheduler, AsyncioScheduler
"""

from engine.scheduler import Scheduler, ManualScheduler, AsyncioScheduler
from engine.playback  import PlaybackController, PlaybackState, ViewState, NodeView

__all__ = [
    "PlaybackController",
    "PlaybackState",
    "ViewState",
    "NodeView",
    "Scheduler",
    "ManualScheduler",
    "AsyncioScheduler",
]
