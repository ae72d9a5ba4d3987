"""Engines consuming materialized schedules."""

from sherpa.engine.streaks import qualifies_for_streak

__all__ = [
    "qualifies_for_streak",
]
