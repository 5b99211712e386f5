"""Subprocess-based Maven invoker."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import signal
import subprocess
from pathlib import Path

from native_maven.errors import (
    SubprocessFailureError,
    SubprocessInvocationError,
    SubprocessTimeoutError,
)
from native_maven.invoker.base import InvocationRequest, InvocationResult

TIMEOUT_EXIT_CODE = 124
logger = logging.getLogger(__name__)


class MavenInvoker:
    """Run Maven synchronously with inherited stdout/stderr."""

    def __init__(
        self,
        *,
        executable: str | None = None,
        timeout_seconds: int | None = None,
    ) -> None:
        self.executable = executable
        self.timeout_seconds = timeout_seconds

    def execute(self, request: InvocationRequest) -> InvocationResult:
        executable = resolve_maven_executable(self.executable)
        run_args = [executable, *build_maven_args(request)]
        logger.info("Invoking %s", shlex.join(run_args))

        try:
            process = subprocess.Popen(  # noqa: S603
                run_args,
                cwd=str(request.working_directory) if request.working_directory else None,
            )
        except FileNotFoundError as error:
            raise SubprocessInvocationError(f"Maven executable not found: {executable}") from error
        except OSError as error:
            raise SubprocessInvocationError(f"Maven failed to start: {error}") from error

        try:
            returncode = process.wait(timeout=self.timeout_seconds)
        except subprocess.TimeoutExpired:
            _terminate_process(process)
            return InvocationResult(
                exit_code=TIMEOUT_EXIT_CODE,
                execution_exception=SubprocessTimeoutError(
                    f"Maven did not finish within {self.timeout_seconds}s",
                    exit_code=TIMEOUT_EXIT_CODE,
                ),
            )

        if returncode < 0:
            return InvocationResult(
                exit_code=returncode,
                execution_exception=SubprocessFailureError(
                    f"Maven was terminated by signal {_signal_name(-returncode)}",
                    exit_code=returncode,
                ),
            )
        return InvocationResult(exit_code=returncode)


def resolve_maven_executable(explicit: str | None = None, *, os_name: str | None = None) -> str:
    """Pick the Maven launcher: explicit value, then MAVEN_HOME/M2_HOME, then PATH."""

    if explicit:
        return explicit
    launcher = "mvn.cmd" if (os_name or os.name) == "nt" else "mvn"
    for variable in ("MAVEN_HOME", "M2_HOME"):
        home = os.getenv(variable)
        if home:
            candidate = Path(home) / "bin" / launcher
            if candidate.is_file():
                return str(candidate)
            logger.debug("%s is set but %s does not exist", variable, candidate)
    return shutil.which(launcher) or launcher


def build_maven_args(request: InvocationRequest) -> list[str]:
    args: list[str] = []
    if request.batch_mode:
        args.append("-B")
    args.extend(["-f", str(request.pom_file)])
    if request.profiles:
        args.extend(["-P", ",".join(request.profiles)])
    args.extend(f"-D{key}={value}" for key, value in request.properties.items())
    args.extend(request.goals)
    return args


def _signal_name(number: int) -> str:
    try:
        return signal.Signals(number).name
    except ValueError:
        return str(number)


def _terminate_process(process: subprocess.Popen[bytes]) -> None:
    try:
        process.terminate()
    except OSError:
        return
    try:
        process.wait(timeout=2)
    except subprocess.TimeoutExpired:
        try:
            process.kill()
        except OSError:
            return
        process.wait(timeout=2)
