"""Native link command: path resolution and linker delegation."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Protocol

from native_maven.errors import CommandFailure

TOOL_ROOT_DIR = "gvm"
logger = logging.getLogger(__name__)


@dataclass(slots=True)
class ClientConfig:
    """Client configuration handed to the external linker."""

    app_name: str
    graalvm_home: Path | None = None
    main_class: str | None = None
    classpath: tuple[str, ...] = ()
    native_image_args: tuple[str, ...] = ()
    verbose: bool = False

    def to_json(self) -> str:
        payload = asdict(self)
        payload["graalvm_home"] = str(self.graalvm_home) if self.graalvm_home else None
        payload["classpath"] = list(self.classpath)
        payload["native_image_args"] = list(self.native_image_args)
        return json.dumps(payload, indent=2, sort_keys=True)


@dataclass(slots=True, frozen=True)
class LinkPaths:
    output_path: Path
    tmp_path: Path


class NativeLinker(Protocol):
    """External native linking entry point."""

    def link(
        self,
        output_path: Path,
        tmp_path: Path,
        client_config: ClientConfig,
        target: str,
    ) -> None:
        """Link the native image for ``target``."""


def resolve_link_paths(output_dir: Path) -> LinkPaths:
    """Tool root is the parent of the output dir; work files go to ``<root>/gvm/tmp``."""

    tool_root = output_dir.parent.absolute()
    return LinkPaths(output_path=tool_root, tmp_path=tool_root / TOOL_ROOT_DIR / "tmp")


def run_link(
    *,
    output_dir: Path,
    client_config: ClientConfig,
    target: str,
    linker: NativeLinker,
) -> LinkPaths:
    paths = resolve_link_paths(output_dir)
    logger.debug("Start linking in %s", paths.tmp_path)
    try:
        linker.link(paths.output_path, paths.tmp_path, client_config, target)
    except Exception as error:  # noqa: BLE001
        logger.exception("Native link failed for target %s", target)
        raise CommandFailure("Error", error) from error
    return paths
