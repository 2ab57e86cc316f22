"""Operator yes/no dialog shown on the point-of-sale desktop."""

import logging
from enum import Enum
from typing import List, Optional

from tocrecovery.utils.errors import DialogUnavailable, NonZeroExit, ProcessError, SpawnError
from tocrecovery.utils.process import ProcessRunner

logger = logging.getLogger(__name__)

# zenity exits with 1 when the cancel button ("No") is pressed or the window is closed
ZENITY_CANCEL_EXIT = 1


class DialogAnswer(Enum):
    """Operator's answer to the dialog."""

    YES = "yes"
    NO = "no"
    UNAVAILABLE = "unavailable"


class DialogGate:
    """Asks the on-site operator a blocking yes/no question through zenity.

    There is no timeout: the agent waits for as long as the operator takes.
    """

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        title: str = "Estado del Sistema",
        text: str = "No se detectaron ventas en {minutes} minutos. ¿Existen problemas?",
        width: int = 400,
        ok_label: str = "Sí",
        cancel_label: str = "No",
        dialog_binary: str = "zenity",
    ):
        self.runner = runner or ProcessRunner()
        self.title = title
        self.text = text
        self.width = width
        self.ok_label = ok_label
        self.cancel_label = cancel_label
        self.dialog_binary = dialog_binary

    def ask(self, title: str, text: str) -> DialogAnswer:
        """
        Show a question dialog and wait for the operator.

        Args:
            title: Window title
            text: Question text

        Returns:
            DialogAnswer: YES for the ok button, NO for cancel, UNAVAILABLE if the
            dialog could not be shown
        """
        args = [
            self.dialog_binary,
            "--question",
            f"--title={title}",
            f"--text={text}",
            f"--width={self.width}",
            f"--ok-label={self.ok_label}",
            f"--cancel-label={self.cancel_label}",
        ]

        try:
            return self._show(args)
        except DialogUnavailable as e:
            logger.warning(e.message, extra={"reason": e.details})
            return DialogAnswer.UNAVAILABLE

    def _show(self, args: List[str]) -> DialogAnswer:
        try:
            self.runner.run(args)
        except SpawnError as e:
            raise DialogUnavailable("Operator dialog could not be launched", details=e.message) from e
        except NonZeroExit as e:
            if e.returncode == ZENITY_CANCEL_EXIT:
                return DialogAnswer.NO
            raise DialogUnavailable("Operator dialog failed", details=e.message) from e
        except ProcessError as e:
            raise DialogUnavailable("Operator dialog failed", details=e.message) from e
        except ValueError as e:
            # e.g. a NUL byte in the configured title or text
            raise DialogUnavailable("Operator dialog arguments rejected", details=str(e)) from e

        return DialogAnswer.YES

    def ask_about_silence(self, interval_ms: int) -> DialogAnswer:
        """Ask whether something is wrong after ``interval_ms`` without sales."""
        minutes = max(1, round(interval_ms / 60000))
        return self.ask(self.title, self.text.format(minutes=minutes))
