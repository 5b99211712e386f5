"""Invocation interface for running the build tool as a subprocess."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol


@dataclass(slots=True)
class InvocationRequest:
    """Inputs for one build-tool run. Built fresh per call."""

    pom_file: Path
    goals: tuple[str, ...]
    profiles: tuple[str, ...] = ()
    properties: dict[str, str] = field(default_factory=dict)
    batch_mode: bool = False
    working_directory: Path | None = None


@dataclass(slots=True)
class InvocationResult:
    """Outcome of a finished build-tool run."""

    exit_code: int
    execution_exception: BaseException | None = None


class Invoker(Protocol):
    """Protocol implemented by build-tool runners."""

    def execute(self, request: InvocationRequest) -> InvocationResult:
        """Run the request synchronously and return its outcome."""
