"""External command execution for the disaster-recovery agent."""

import logging
import subprocess
import sys
import threading
from collections import deque
from dataclasses import dataclass
from typing import IO, List, Optional, Tuple

from .errors import NonZeroExit, SpawnError, TimeoutExceeded

logger = logging.getLogger(__name__)

STDERR_TAIL_CHARS = 2000
STDERR_TAIL_LINES = 50
READ_CHUNK_SIZE = 64 * 1024


@dataclass
class ProcessResult:
    """Outcome of a finished external command."""

    returncode: int
    stdout: Optional[bytes] = None


class ProcessRunner:
    """Runs external commands as argument vectors, never through a shell."""

    def run(
        self,
        args: List[str],
        capture: bool = False,
        timeout: Optional[float] = None,
    ) -> ProcessResult:
        """
        Run a command and wait for it to finish.

        Args:
            args: Command and arguments
            capture: Collect stdout as bytes instead of streaming it; stderr still
                streams to the agent's stderr
            timeout: Optional timeout in seconds; the child is killed when exceeded

        Returns:
            ProcessResult: Exit status and, in capture mode, the stdout bytes

        Raises:
            SpawnError: If the command could not be launched
            NonZeroExit: If the command exited with a non-zero status
            TimeoutExceeded: If the command ran past the timeout
        """
        logger.debug("Running command", extra={"command": args, "capture": capture})

        if capture:
            returncode, stdout, stderr_tail = self._run_captured(args, timeout)
        else:
            returncode, stdout, stderr_tail = self._run_inherited(args, timeout), None, ""

        if returncode != 0:
            raise NonZeroExit(
                f"{args[0]} exited with code {returncode}",
                returncode=returncode,
                stderr_tail=stderr_tail,
                command=args,
            )

        return ProcessResult(returncode=returncode, stdout=stdout)

    def _run_inherited(self, args: List[str], timeout: Optional[float]) -> int:
        try:
            result = subprocess.run(args, timeout=timeout)
        except subprocess.TimeoutExpired as e:
            raise TimeoutExceeded(f"Command timed out after {timeout}s: {args[0]}", command=args) from e
        except OSError as e:
            raise SpawnError(f"Could not launch {args[0]}: {e}", command=args) from e

        return result.returncode

    def _run_captured(self, args: List[str], timeout: Optional[float]) -> Tuple[int, bytes, str]:
        try:
            process = subprocess.Popen(args, stdout=subprocess.PIPE, stderr=subprocess.PIPE)
        except OSError as e:
            raise SpawnError(f"Could not launch {args[0]}: {e}", command=args) from e

        stdout_chunks: List[bytes] = []
        stderr_lines: deque = deque(maxlen=STDERR_TAIL_LINES)

        # Both pipes are drained concurrently so a chatty stderr cannot block the dump
        readers = [
            threading.Thread(target=self._collect_output, args=(process.stdout, stdout_chunks), daemon=True),
            threading.Thread(target=self._tee_error_output, args=(process.stderr, stderr_lines), daemon=True),
        ]
        for reader in readers:
            reader.start()

        try:
            returncode = process.wait(timeout=timeout)
        except subprocess.TimeoutExpired as e:
            process.kill()
            process.wait()
            raise TimeoutExceeded(f"Command timed out after {timeout}s: {args[0]}", command=args) from e
        finally:
            for reader in readers:
                reader.join()
            process.stdout.close()
            process.stderr.close()

        stderr_tail = b"".join(stderr_lines).decode("utf-8", errors="replace")[-STDERR_TAIL_CHARS:]
        return returncode, b"".join(stdout_chunks), stderr_tail

    def _collect_output(self, stream: IO[bytes], chunks: List[bytes]) -> None:
        for chunk in iter(lambda: stream.read(READ_CHUNK_SIZE), b""):
            chunks.append(chunk)

    def _tee_error_output(self, stream: IO[bytes], lines: deque) -> None:
        """Copy the child's stderr to ours as it arrives, keeping the last lines."""
        for line in iter(stream.readline, b""):
            sys.stderr.buffer.write(line)
            sys.stderr.flush()
            lines.append(line)
