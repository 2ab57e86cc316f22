"""Container management for the disaster-recovery agent."""

from .runtime import ContainerRuntime

__all__ = ["ContainerRuntime"]
