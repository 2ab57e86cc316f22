"""Periodic monitoring loop driving probe, operator dialog and recovery actions."""

import logging
import signal
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from tocrecovery.backup.engine import SnapshotEngine
from tocrecovery.config.settings import RecoveryConfig
from tocrecovery.utils.errors import NoSnapshotAvailable, ProbeError, RecoveryError

from .activity import ActivityProbe
from .dialog import DialogAnswer, DialogGate

logger = logging.getLogger(__name__)


class TickOutcome(Enum):
    """What happened during one iteration of the loop."""

    ACTIVE = "active"
    PROBE_FAILED = "probe_failed"
    DIALOG_UNAVAILABLE = "dialog_unavailable"
    CAPTURED = "captured"
    RESTORED = "restored"
    NO_SNAPSHOT = "no_snapshot"
    ACTION_FAILED = "action_failed"
    TICK_FAILED = "tick_failed"
    STOPPED = "stopped"


@dataclass
class TickResult:
    """Outcome of a tick and how long to sleep before the next one."""

    outcome: TickOutcome
    delay_s: float


class ControlLoop:
    """Runs one tick at a time: probe, ask the operator if quiet, act, sleep.

    Answer polarity: YES means the operator reports a problem and the latest
    snapshot is restored; NO means all is well and a preventive snapshot is taken.
    """

    def __init__(
        self,
        config: RecoveryConfig,
        probe: ActivityProbe,
        gate: DialogGate,
        engine: SnapshotEngine,
        sleep: Optional[Callable[[float], None]] = None,
    ):
        self.config = config
        self.probe = probe
        self.gate = gate
        self.engine = engine
        self._stop_event = threading.Event()
        self.sleep = sleep or self._interruptible_sleep

    def _interruptible_sleep(self, seconds: float) -> None:
        self._stop_event.wait(seconds)

    @property
    def stop_requested(self) -> bool:
        return self._stop_event.is_set()

    def request_stop(self, *_args) -> None:
        """Stop after the current tick; wakes the loop if it is sleeping."""
        if not self._stop_event.is_set():
            logger.info("Stop requested, finishing current tick")
        self._stop_event.set()

    def install_signal_handlers(self) -> None:
        """Route SIGTERM and SIGINT to :meth:`request_stop`."""
        signal.signal(signal.SIGTERM, self.request_stop)
        signal.signal(signal.SIGINT, self.request_stop)

    def tick(self) -> TickResult:
        """Run one iteration and report what happened.

        A requested stop is honoured between steps: after the probe and after the
        dialog, never once an action has started.
        """
        standard = self.config.check_interval_s
        recovery = self.config.recovery_delay_s

        try:
            active = self.probe.has_recent_activity(self.config.check_interval_ms)
        except ProbeError as e:
            logger.error(f"Error checking recent sales: {e.message}", extra={"details": e.details})
            return TickResult(TickOutcome.PROBE_FAILED, recovery)

        if active:
            logger.debug("Sales recorded recently, nothing to do")
            return TickResult(TickOutcome.ACTIVE, standard)

        if self.stop_requested:
            return TickResult(TickOutcome.STOPPED, 0)

        answer = self.gate.ask_about_silence(self.config.check_interval_ms)
        if answer is DialogAnswer.UNAVAILABLE:
            logger.warning("Operator dialog unavailable, skipping this check")
            return TickResult(TickOutcome.DIALOG_UNAVAILABLE, standard)

        # A stop that arrived while the dialog was open cancels the action
        if self.stop_requested:
            logger.warning("Stop requested, operator answer discarded", extra={"answer": answer.value})
            return TickResult(TickOutcome.STOPPED, 0)

        try:
            if answer is DialogAnswer.YES:
                logger.warning("Problems reported - restoring latest backup")
                self.engine.restore()
                return TickResult(TickOutcome.RESTORED, standard)

            logger.info("Creating preventive backup")
            self.engine.capture()
            return TickResult(TickOutcome.CAPTURED, standard)
        except NoSnapshotAvailable as e:
            logger.warning(f"{type(e).__name__}: {e.message}")
            return TickResult(TickOutcome.NO_SNAPSHOT, standard)
        except RecoveryError as e:
            logger.error(
                f"{type(e).__name__}: {e.message}",
                extra={"details": e.details, "suggestions": e.suggestions},
            )
            return TickResult(TickOutcome.ACTION_FAILED, recovery)
        except Exception:
            logger.exception("Unexpected error in monitoring cycle")
            return TickResult(TickOutcome.ACTION_FAILED, recovery)

    def run_forever(self) -> None:
        """Tick and sleep until a stop is requested."""
        logger.info(
            "Starting monitoring system",
            extra={"check_interval_ms": self.config.check_interval_ms},
        )

        while not self.stop_requested:
            try:
                result = self.tick()
            except Exception:
                logger.exception("Error in monitoring cycle")
                result = TickResult(TickOutcome.TICK_FAILED, self.config.recovery_delay_s)

            if self.stop_requested:
                break
            self.sleep(result.delay_s)

        logger.info("Monitoring system stopped")
