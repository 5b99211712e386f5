"""CLI entrypoint for native-maven."""

import logging
from collections.abc import Callable
from pathlib import Path

import rich_click as click

from native_maven import __version__
from native_maven.config import AgentDirPolicy
from native_maven.controllers import AgentRunCommand, LinkCommand, NativeCliController
from native_maven.errors import CommandFailure

click.rich_click.USE_MARKDOWN = True
CONTROLLER = NativeCliController()


@click.group()
@click.version_option(version=__version__, prog_name="native-maven")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging level for diagnostics on stderr.",
)
def native_maven(log_level: str) -> None:
    """Native-image helper goals for Maven projects."""

    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )


@native_maven.command("runagent")
@click.option(
    "--project-root",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Directory containing pom.xml. Defaults to NATIVE_MAVEN_PROJECT_ROOT or cwd.",
)
@click.option(
    "--graalvm-home",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="JDK used to run the application. Defaults to GRAALVM_HOME.",
)
@click.option(
    "-P",
    "--profile",
    "profiles",
    multiple=True,
    help="Active Maven profile id, comma separated or repeated.",
)
@click.option(
    "-D",
    "--define",
    "defines",
    multiple=True,
    help="User property passed to Maven as KEY=VALUE. Can be repeated.",
)
@click.option(
    "--clean-agent-dir/--merge-agent-dir",
    default=None,
    help=(
        "Clear agent config files from a previous run before starting, or merge into them. "
        "Defaults to NATIVE_MAVEN_AGENT_DIR_POLICY (merge)."
    ),
)
@click.option(
    "--timeout-seconds",
    type=click.IntRange(min=1),
    default=None,
    help="Terminate Maven after this many seconds. Waits indefinitely when omitted.",
)
@click.option("--maven-executable", default=None, help="Maven launcher to run.")
def runagent(  # noqa: PLR0913
    project_root: Path | None,
    graalvm_home: Path | None,
    profiles: tuple[str, ...],
    defines: tuple[str, ...],
    clean_agent_dir: bool | None,
    timeout_seconds: int | None,
    maven_executable: str | None,
) -> None:
    """Run `javafx:run` with the native-image agent to collect reflection configuration."""

    dir_policy = None
    if clean_agent_dir is not None:
        dir_policy = AgentDirPolicy.CLEAN if clean_agent_dir else AgentDirPolicy.MERGE
    _run(
        lambda: CONTROLLER.run_agent(
            AgentRunCommand(
                project_root=project_root,
                graalvm_home=graalvm_home,
                profiles=_split_profiles(profiles),
                properties=_parse_defines(defines),
                dir_policy=dir_policy,
                timeout_seconds=timeout_seconds,
                maven_executable=maven_executable,
            ),
        ),
    )


@native_maven.command("link")
@click.option(
    "--project-root",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Project directory. Defaults to NATIVE_MAVEN_PROJECT_ROOT or cwd.",
)
@click.option(
    "--output-dir",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="Build output directory; its parent is the link tool root.",
)
@click.option("--target", default=None, help="Target identifier, for example host or ios.")
@click.option(
    "--graalvm-home",
    type=click.Path(path_type=Path, file_okay=False),
    default=None,
    help="GraalVM used for linking. Defaults to GRAALVM_HOME.",
)
@click.option(
    "--link-command",
    default=None,
    help=(
        "Link command template. Supports {output_dir}, {tmp_dir}, {config_file}, "
        "{target} and {app_name}. If omitted, NATIVE_MAVEN_LINK_COMMAND is used."
    ),
)
@click.option("--main-class", default=None, help="Application main class.")
@click.option("--app-name", default=None, help="Application name. Defaults to project dir name.")
@click.option("--classpath", "classpath", multiple=True, help="Classpath entry. Can be repeated.")
@click.option(
    "--native-image-arg",
    "native_image_args",
    multiple=True,
    help="Extra native-image argument. Can be repeated.",
)
@click.option("--verbose/--no-verbose", default=False, show_default=True, help="Verbose linker.")
def link(  # noqa: PLR0913
    project_root: Path | None,
    output_dir: Path | None,
    target: str | None,
    graalvm_home: Path | None,
    link_command: str | None,
    main_class: str | None,
    app_name: str | None,
    classpath: tuple[str, ...],
    native_image_args: tuple[str, ...],
    verbose: bool,
) -> None:
    """Link the native image with the external linker."""

    _run(
        lambda: CONTROLLER.link(
            LinkCommand(
                project_root=project_root,
                output_dir=output_dir,
                target=target,
                graalvm_home=graalvm_home,
                link_command=link_command,
                main_class=main_class,
                app_name=app_name,
                classpath=classpath,
                native_image_args=native_image_args,
                verbose=verbose,
            ),
        ),
    )


def _run(action: Callable[[], list[str]]) -> None:
    try:
        lines = action()
    except CommandFailure as error:
        raise click.ClickException(error.describe()) from error
    except ValueError as error:
        raise click.ClickException(str(error)) from error
    _emit_lines(lines)


def _split_profiles(values: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(
        profile.strip() for value in values for profile in value.split(",") if profile.strip()
    )


def _parse_defines(values: tuple[str, ...]) -> dict[str, str]:
    properties: dict[str, str] = {}
    for value in values:
        key, separator, property_value = value.partition("=")
        if not key.strip():
            raise click.BadParameter(f"Expected KEY=VALUE, got {value!r}.")
        properties[key.strip()] = property_value if separator else "true"
    return properties


def _emit_lines(lines: list[str]) -> None:
    for line in lines:
        click.echo(line)


if __name__ == "__main__":  # pragma: no cover
    native_maven()
