"""Frame clock and update task scheduling."""
from .scheduler import FrameScheduler, TaskRecord

__all__ = [
    'FrameScheduler',
    'TaskRecord',
]
