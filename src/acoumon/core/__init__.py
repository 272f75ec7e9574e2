"""Core monitoring pipeline: per-frame processing, sinks, and the session state machine.

This package sits between the spectrum sources and the GUI. The
:class:`FrameProcessor` is a pure per-frame function; :class:`MonitorSession`
owns the source lifecycle and publishes each tick's :class:`FrameResult` to
the attached sinks.
"""

from .models import FrameResult, RenderSeries
from .monitor import MonitorSession, MonitorState
from .pipeline import CallbackSink, FrameProcessor, FrameSink, LatestFrameSink
from .series import build_series

__all__ = [
    "FrameResult",
    "RenderSeries",
    "MonitorSession",
    "MonitorState",
    "FrameProcessor",
    "FrameSink",
    "LatestFrameSink",
    "CallbackSink",
    "build_series",
]
