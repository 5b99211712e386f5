"""Native-image agent run: descriptor patching and Maven invocation."""

from native_maven.agent.patch import (
    build_agent_flag,
    patch_configuration,
    patch_descriptor,
    toolchain_java,
)
from native_maven.agent.runner import AgentRunResult, prepare_agent_dir, run_agent

__all__ = [
    "AgentRunResult",
    "build_agent_flag",
    "patch_configuration",
    "patch_descriptor",
    "prepare_agent_dir",
    "run_agent",
    "toolchain_java",
]
