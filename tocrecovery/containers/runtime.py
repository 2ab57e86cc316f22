"""Docker container operations for the disaster-recovery agent."""

import logging
from typing import Any, List, Optional, Sequence, Tuple

import docker
from docker.errors import NotFound

from tocrecovery.utils.process import ProcessResult, ProcessRunner

logger = logging.getLogger(__name__)


class ContainerRuntime:
    """Drives the docker CLI for the database container and one-shot containers.

    Lifecycle commands go through the docker CLI so their output reaches the
    operator's terminal; read-only inspection uses the Docker SDK.
    """

    def __init__(
        self,
        runner: Optional[ProcessRunner] = None,
        timeout: Optional[float] = None,
        docker_binary: str = "docker",
    ):
        """
        Initialize container runtime.

        Args:
            runner: Process runner used for docker CLI calls
            timeout: Optional timeout in seconds for every docker CLI call
            docker_binary: Name or path of the docker CLI
        """
        self.runner = runner or ProcessRunner()
        self.timeout = timeout
        self.docker_binary = docker_binary
        self._client = None

    @property
    def client(self) -> Any:
        """Get Docker SDK client, creating it if necessary."""
        if self._client is None:
            self._client = docker.from_env()
        return self._client

    def exec_capture(self, container: str, command: Sequence[str]) -> bytes:
        """Run a command inside a running container and return its stdout."""
        result = self.runner.run(
            [self.docker_binary, "exec", container, *command],
            capture=True,
            timeout=self.timeout,
        )
        return result.stdout or b""

    def stop(self, container: str) -> ProcessResult:
        """Stop a container."""
        logger.info(f"Stopping container {container}", extra={"container": container})
        return self.runner.run([self.docker_binary, "stop", container], timeout=self.timeout)

    def start(self, container: str) -> ProcessResult:
        """Start a stopped container."""
        logger.info(f"Starting container {container}", extra={"container": container})
        return self.runner.run([self.docker_binary, "start", container], timeout=self.timeout)

    def run_oneshot(
        self,
        image: str,
        volumes: List[Tuple[str, str]],
        command: Sequence[str],
    ) -> ProcessResult:
        """
        Run a disposable container that is removed once its command exits.

        Args:
            image: Image to run
            volumes: ``(source, container_path)`` mounts
            command: Command to run inside the container

        Returns:
            ProcessResult: Exit status of the container command
        """
        args = [self.docker_binary, "run", "--rm"]
        for source, target in volumes:
            args.extend(["-v", f"{source}:{target}"])
        args.append(image)
        args.extend(command)

        return self.runner.run(args, timeout=self.timeout)

    def status(self, container: str) -> Optional[str]:
        """
        Get the state of a container (``running``, ``exited``...).

        Returns:
            Optional[str]: Container state, or None if the container does not exist

        Raises:
            DockerException: If the Docker daemon cannot be reached
        """
        try:
            return self.client.containers.get(container).status
        except NotFound:
            return None
