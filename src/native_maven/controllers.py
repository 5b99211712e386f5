"""Controllers for native-maven CLI commands."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

from native_maven.agent import run_agent
from native_maven.config import AgentDirPolicy, Settings
from native_maven.descriptor import PluginNotFound
from native_maven.invoker import Invoker, MavenInvoker
from native_maven.link import ClientConfig, CommandLinker, NativeLinker, run_link


@dataclass(slots=True)
class AgentRunCommand:
    """CLI input for the native-image agent run."""

    project_root: Path | None
    graalvm_home: Path | None = None
    profiles: tuple[str, ...] = ()
    properties: dict[str, str] = field(default_factory=dict)
    dir_policy: AgentDirPolicy | None = None
    timeout_seconds: int | None = None
    maven_executable: str | None = None


@dataclass(slots=True)
class LinkCommand:
    """CLI input for native linking."""

    project_root: Path | None
    output_dir: Path | None = None
    target: str | None = None
    graalvm_home: Path | None = None
    link_command: str | None = None
    main_class: str | None = None
    app_name: str | None = None
    classpath: tuple[str, ...] = ()
    native_image_args: tuple[str, ...] = ()
    verbose: bool = False


class NativeCliController:
    """Resolve settings, run one command and render its report lines."""

    def __init__(
        self,
        *,
        invoker_factory: Callable[[Settings], Invoker] | None = None,
        linker_factory: Callable[[Settings], NativeLinker] | None = None,
    ) -> None:
        self._invoker_factory = invoker_factory or _maven_invoker
        self._linker_factory = linker_factory or _command_linker

    def run_agent(self, command: AgentRunCommand) -> list[str]:
        settings = Settings.from_env(project_root=command.project_root)
        if command.graalvm_home is not None:
            settings.toolchain.graalvm_home = command.graalvm_home
        if command.dir_policy is not None:
            settings.agent.dir_policy = command.dir_policy
        if command.timeout_seconds is not None:
            settings.invoker.timeout_seconds = command.timeout_seconds
        if command.maven_executable is not None:
            settings.invoker.maven_executable = command.maven_executable
        settings.validate_for_agent()

        result = run_agent(
            pom_path=settings.pom_path,
            agent_pom_path=settings.agent_pom_path,
            agent_dir=settings.agent_dir,
            toolchain_home=settings.toolchain.graalvm_home,
            invoker=self._invoker_factory(settings),
            profiles=command.profiles,
            properties=command.properties,
            dir_policy=settings.agent.dir_policy,
            batch_mode=settings.invoker.batch_mode,
        )

        lines = ["Native-image agent run:"]
        if isinstance(result.lookup, PluginNotFound):
            lines.append(
                "Warning: no JavaFX plugin found "
                f"({result.lookup.group_id}:{result.lookup.artifact_id}), descriptor not patched",
            )
        if result.removed_stale_entries:
            lines.append(f"Removed stale entries: {result.removed_stale_entries}")
        lines.append(f"Agent config dir: {result.agent_dir}")
        lines.append(f"Exit code: {result.exit_code}")
        return lines

    def link(self, command: LinkCommand) -> list[str]:
        settings = Settings.from_env(project_root=command.project_root)
        if command.output_dir is not None:
            settings.link.output_dir = command.output_dir
        if command.target is not None:
            settings.link.target = command.target
        if command.graalvm_home is not None:
            settings.toolchain.graalvm_home = command.graalvm_home
        if command.link_command is not None:
            settings.link.command_template = command.link_command
        if command.main_class is not None:
            settings.link.main_class = command.main_class
        if command.app_name is not None:
            settings.link.app_name = command.app_name
        settings.validate_for_link()

        client_config = ClientConfig(
            app_name=settings.app_name,
            graalvm_home=settings.toolchain.graalvm_home,
            main_class=settings.link.main_class,
            classpath=command.classpath,
            native_image_args=command.native_image_args,
            verbose=command.verbose,
        )
        paths = run_link(
            output_dir=settings.output_dir,
            client_config=client_config,
            target=settings.link.target,
            linker=self._linker_factory(settings),
        )
        return [
            "Native link:",
            f"Target: {settings.link.target}",
            f"Output dir: {paths.output_path}",
            f"Temp dir: {paths.tmp_path}",
        ]


def _maven_invoker(settings: Settings) -> Invoker:
    return MavenInvoker(
        executable=settings.invoker.maven_executable,
        timeout_seconds=settings.invoker.timeout_seconds,
    )


def _command_linker(settings: Settings) -> NativeLinker:
    return CommandLinker(settings.link.command_template or "")
