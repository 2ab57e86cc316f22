"""Sales monitoring, operator dialog and the recovery control loop."""

from .activity import ActivityProbe
from .dialog import DialogAnswer, DialogGate
from .loop import ControlLoop, TickOutcome, TickResult

__all__ = ["ActivityProbe", "ControlLoop", "DialogAnswer", "DialogGate", "TickOutcome", "TickResult"]
