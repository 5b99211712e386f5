"""Build-tool invokers."""

from native_maven.invoker.base import InvocationRequest, InvocationResult, Invoker
from native_maven.invoker.maven import MavenInvoker, build_maven_args, resolve_maven_executable

__all__ = [
    "InvocationRequest",
    "InvocationResult",
    "Invoker",
    "MavenInvoker",
    "build_maven_args",
    "resolve_maven_executable",
]
