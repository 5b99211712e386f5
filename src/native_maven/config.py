"""Runtime configuration for native-maven commands."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

POM_FILE_NAME = "pom.xml"
AGENT_POM_FILE_NAME = "agentPom.xml"
AGENT_CONFIG_SUBDIR = Path("src/main/resources/META-INF/native-image")
DEFAULT_OUTPUT_SUBDIR = Path("target/client")
DEFAULT_TARGET = "host"


class AgentDirPolicy(str, Enum):
    """What to do with agent config files left by a previous run."""

    MERGE = "merge"
    CLEAN = "clean"


@dataclass(slots=True)
class ToolchainSettings:
    """JDK distribution used to run the instrumented application."""

    graalvm_home: Path | None = None


@dataclass(slots=True)
class InvokerSettings:
    """Maven subprocess settings."""

    maven_executable: str | None = None
    timeout_seconds: int | None = None
    batch_mode: bool = False


@dataclass(slots=True)
class AgentSettings:
    """Agent run settings."""

    dir_policy: AgentDirPolicy = AgentDirPolicy.MERGE


@dataclass(slots=True)
class LinkSettings:
    """Native link settings."""

    output_dir: Path | None = None
    target: str = DEFAULT_TARGET
    command_template: str | None = None
    app_name: str | None = None
    main_class: str | None = None


@dataclass(slots=True)
class Settings:
    """Application settings grouped by command concerns."""

    project_root: Path = field(default_factory=Path.cwd)
    toolchain: ToolchainSettings = field(default_factory=ToolchainSettings)
    invoker: InvokerSettings = field(default_factory=InvokerSettings)
    agent: AgentSettings = field(default_factory=AgentSettings)
    link: LinkSettings = field(default_factory=LinkSettings)

    @classmethod
    def from_env(cls, project_root: Path | None = None) -> Settings:
        """Load settings from environment with defaults relative to the project root."""

        root = project_root or Path(os.getenv("NATIVE_MAVEN_PROJECT_ROOT") or Path.cwd())
        root = root.absolute()
        return cls(
            project_root=root,
            toolchain=ToolchainSettings(
                graalvm_home=_env_path("NATIVE_MAVEN_GRAALVM_HOME") or _env_path("GRAALVM_HOME"),
            ),
            invoker=InvokerSettings(
                maven_executable=os.getenv("NATIVE_MAVEN_MAVEN_EXECUTABLE") or None,
                timeout_seconds=_env_optional_int("NATIVE_MAVEN_INVOKER_TIMEOUT_SECONDS"),
                batch_mode=_env_bool("NATIVE_MAVEN_BATCH_MODE", default=False),
            ),
            agent=AgentSettings(
                dir_policy=_env_dir_policy("NATIVE_MAVEN_AGENT_DIR_POLICY"),
            ),
            link=LinkSettings(
                output_dir=_env_path("NATIVE_MAVEN_OUTPUT_DIR"),
                target=os.getenv("NATIVE_MAVEN_TARGET", DEFAULT_TARGET),
                command_template=os.getenv("NATIVE_MAVEN_LINK_COMMAND") or None,
                app_name=os.getenv("NATIVE_MAVEN_APP_NAME") or None,
                main_class=os.getenv("NATIVE_MAVEN_MAIN_CLASS") or None,
            ),
        )

    @property
    def pom_path(self) -> Path:
        return self.project_root / POM_FILE_NAME

    @property
    def agent_pom_path(self) -> Path:
        return self.project_root / AGENT_POM_FILE_NAME

    @property
    def agent_dir(self) -> Path:
        return self.project_root / AGENT_CONFIG_SUBDIR

    @property
    def output_dir(self) -> Path:
        return self.link.output_dir or self.project_root / DEFAULT_OUTPUT_SUBDIR

    @property
    def app_name(self) -> str:
        return self.link.app_name or self.project_root.resolve().name

    def validate_for_agent(self) -> None:
        """Raise configuration error if the agent run cannot be started."""

        if self.toolchain.graalvm_home is None:
            raise ValueError(
                "GraalVM home is not set. Set GRAALVM_HOME, NATIVE_MAVEN_GRAALVM_HOME "
                "or pass --graalvm-home.",
            )
        _validate_timeout(self.invoker.timeout_seconds)

    def validate_for_link(self) -> None:
        """Raise configuration error if native linking cannot be started."""

        if not self.link.target.strip():
            raise ValueError("NATIVE_MAVEN_TARGET must not be empty.")
        if self.link.command_template is None or not self.link.command_template.strip():
            raise ValueError(
                "Native link command is not set. Set NATIVE_MAVEN_LINK_COMMAND "
                "or pass --link-command.",
            )


def _validate_timeout(timeout_seconds: int | None) -> None:
    if timeout_seconds is not None and timeout_seconds <= 0:
        raise ValueError("NATIVE_MAVEN_INVOKER_TIMEOUT_SECONDS must be > 0.")


def _env_path(name: str) -> Path | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    return Path(value.strip())


def _env_optional_int(name: str) -> int | None:
    value = os.getenv(name)
    if value is None or not value.strip():
        return None
    try:
        return int(value)
    except ValueError as error:
        raise ValueError(f"Invalid integer value for {name}: {value!r}") from error


def _env_dir_policy(name: str) -> AgentDirPolicy:
    value = os.getenv(name)
    if value is None or not value.strip():
        return AgentDirPolicy.MERGE
    try:
        return AgentDirPolicy(value.strip().lower())
    except ValueError as error:
        raise ValueError(f"Invalid agent dir policy for {name}: {value!r}") from error


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise ValueError(f"Invalid boolean value for {name}: {value!r}")
