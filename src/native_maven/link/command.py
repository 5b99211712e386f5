"""Linker that runs an external link command template."""

from __future__ import annotations

import logging
import shlex
import subprocess
from pathlib import Path

from native_maven.errors import LinkError
from native_maven.link.base import ClientConfig

CLIENT_CONFIG_FILE_NAME = "client-config.json"
logger = logging.getLogger(__name__)


class CommandLinker:
    """Write the client configuration to the temp dir and run the link command.

    Supported placeholders: ``{output_dir}``, ``{tmp_dir}``, ``{config_file}``,
    ``{target}`` and ``{app_name}``.
    """

    def __init__(self, command_template: str) -> None:
        self.command_template = command_template

    def link(
        self,
        output_path: Path,
        tmp_path: Path,
        client_config: ClientConfig,
        target: str,
    ) -> None:
        tmp_path.mkdir(parents=True, exist_ok=True)
        config_file = tmp_path / CLIENT_CONFIG_FILE_NAME
        config_file.write_text(client_config.to_json() + "\n", "utf-8")

        run_args = build_link_args(
            command_template=self.command_template,
            values={
                "output_dir": str(output_path),
                "tmp_dir": str(tmp_path),
                "config_file": str(config_file),
                "target": target,
                "app_name": client_config.app_name,
            },
        )
        logger.info("Linking %s for %s", client_config.app_name, target)
        try:
            completed = subprocess.run(run_args, cwd=str(tmp_path), check=False)  # noqa: S603
        except FileNotFoundError as error:
            raise LinkError(f"Link command not found: {run_args[0]}") from error
        except OSError as error:
            raise LinkError(f"Link command failed to start: {error}") from error
        if completed.returncode != 0:
            raise LinkError(f"Link command exited with code {completed.returncode}")


def build_link_args(*, command_template: str, values: dict[str, str]) -> list[str]:
    stripped = command_template.strip()
    if not stripped:
        raise LinkError("Link command template is empty.")
    try:
        rendered = stripped.format(**{key: shlex.quote(value) for key, value in values.items()})
    except KeyError as error:
        raise LinkError(f"Unsupported link command placeholder: {error}") from error

    argv = shlex.split(rendered)
    if not argv:
        raise LinkError("Link command template rendered empty command.")
    return argv
