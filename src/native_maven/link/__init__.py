"""Native link delegation."""

from native_maven.link.base import (
    ClientConfig,
    LinkPaths,
    NativeLinker,
    resolve_link_paths,
    run_link,
)
from native_maven.link.command import CommandLinker, build_link_args

__all__ = [
    "ClientConfig",
    "CommandLinker",
    "LinkPaths",
    "NativeLinker",
    "build_link_args",
    "resolve_link_paths",
    "run_link",
]
