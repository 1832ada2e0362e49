"""Runtime services shared by the editing engine."""

from . import telemetry

__all__ = ["telemetry"]
