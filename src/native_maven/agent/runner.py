"""Run the application through Maven with the native-image agent attached."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from native_maven.agent.patch import patch_descriptor
from native_maven.config import AgentDirPolicy
from native_maven.descriptor import BuildDescriptor, PluginLookup
from native_maven.errors import CommandFailure, SubprocessInvocationError
from native_maven.invoker import InvocationRequest, Invoker

RUN_GOAL = "javafx:run"
logger = logging.getLogger(__name__)


@dataclass(slots=True)
class AgentRunResult:
    """Outcome of a successful agent run."""

    agent_pom_path: Path
    agent_dir: Path
    lookup: PluginLookup
    exit_code: int
    removed_stale_entries: int = 0


def run_agent(  # noqa: PLR0913
    *,
    pom_path: Path,
    agent_pom_path: Path,
    agent_dir: Path,
    toolchain_home: Path,
    invoker: Invoker,
    profiles: Sequence[str] = (),
    properties: Mapping[str, str] | None = None,
    dir_policy: AgentDirPolicy = AgentDirPolicy.MERGE,
    batch_mode: bool = False,
) -> AgentRunResult:
    """Patch a copy of the descriptor, run ``javafx:run`` on it and remove the copy."""

    removed = prepare_agent_dir(agent_dir, dir_policy)
    lookup = write_agent_pom(
        pom_path=pom_path,
        agent_pom_path=agent_pom_path,
        agent_dir=agent_dir,
        toolchain_home=toolchain_home,
    )

    request = InvocationRequest(
        pom_file=agent_pom_path,
        goals=(RUN_GOAL,),
        profiles=tuple(profiles),
        properties=dict(properties or {}),
        batch_mode=batch_mode,
        working_directory=pom_path.parent,
    )
    try:
        result = invoker.execute(request)
        if result.exit_code != 0:
            logger.error("%s exited with code %d", RUN_GOAL, result.exit_code)
            raise CommandFailure(f"Error, {RUN_GOAL} failed", result.execution_exception)
    except SubprocessInvocationError as error:
        raise CommandFailure("Error", error) from error
    finally:
        _delete_quietly(agent_pom_path)

    return AgentRunResult(
        agent_pom_path=agent_pom_path,
        agent_dir=agent_dir,
        lookup=lookup,
        exit_code=result.exit_code,
        removed_stale_entries=removed,
    )


def prepare_agent_dir(agent_dir: Path, policy: AgentDirPolicy) -> int:
    """Create the agent config directory; return how many stale entries were removed."""

    try:
        if not agent_dir.exists():
            agent_dir.mkdir(parents=True)
            return 0
        if policy is AgentDirPolicy.MERGE:
            logger.debug("Merging agent configuration into existing %s", agent_dir)
            return 0

        removed = 0
        for entry in agent_dir.iterdir():
            if entry.is_dir() and not entry.is_symlink():
                shutil.rmtree(entry)
            else:
                entry.unlink()
            removed += 1
    except OSError as error:
        raise CommandFailure(f"Cannot prepare agent config directory {agent_dir}", error) from error
    logger.info("Removed %d stale entries from %s", removed, agent_dir)
    return removed


def write_agent_pom(
    *,
    pom_path: Path,
    agent_pom_path: Path,
    agent_dir: Path,
    toolchain_home: Path,
) -> PluginLookup:
    """Write the patched descriptor copy; a partial copy is removed on failure."""

    try:
        descriptor = BuildDescriptor.load(pom_path)
        lookup = patch_descriptor(
            descriptor,
            toolchain_home=toolchain_home,
            agent_dir=agent_dir,
        )
        descriptor.write(agent_pom_path)
    except Exception as error:  # noqa: BLE001
        _delete_quietly(agent_pom_path)
        raise CommandFailure("Error generating agent pom", error) from error
    return lookup


def _delete_quietly(path: Path) -> None:
    try:
        path.unlink(missing_ok=True)
    except OSError as error:
        logger.warning("Could not delete %s: %s", path, error)
