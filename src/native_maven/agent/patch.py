"""Patch the JavaFX plugin configuration to run under the native-image agent."""

from __future__ import annotations

import logging
from pathlib import Path

from native_maven.descriptor import (
    BuildDescriptor,
    ConfigNode,
    PluginLookup,
    PluginNotFound,
)

AGENT_LIBRARY = "native-image-agent"
JAVAFX_PLUGIN_GROUP_ID = "org.openjfx"
JAVAFX_PLUGIN_ARTIFACT_ID = "javafx-maven-plugin"
logger = logging.getLogger(__name__)


def build_agent_flag(agent_dir: Path | str) -> str:
    return f"-agentlib:{AGENT_LIBRARY}=config-merge-dir={agent_dir}"


def toolchain_java(toolchain_home: Path | str) -> str:
    return f"{toolchain_home}/bin/java"


def patch_configuration(config: ConfigNode, *, java_executable: str, agent_flag: str) -> ConfigNode:
    """Point ``executable`` at ``java_executable`` and ensure one agent ``option``.

    An existing option mentioning the agent library is overwritten, otherwise a new
    option is appended, so applying the patch twice gives the same tree.
    """

    config.get_or_create_child("executable").value = java_executable

    options = config.get_or_create_child("options")
    agent_option = options.find_child(
        lambda node: node.value is not None and AGENT_LIBRARY in node.value,
    )
    if agent_option is None:
        options.add_child(ConfigNode.leaf("option", agent_flag))
    else:
        agent_option.value = agent_flag
    return config


def patch_descriptor(
    descriptor: BuildDescriptor,
    *,
    toolchain_home: Path | str,
    agent_dir: Path | str,
) -> PluginLookup:
    """Patch the JavaFX plugin block; a missing block is only a warning."""

    lookup = descriptor.find_plugin(JAVAFX_PLUGIN_GROUP_ID, JAVAFX_PLUGIN_ARTIFACT_ID)
    if isinstance(lookup, PluginNotFound):
        logger.warning(
            "No JavaFX plugin found (%s:%s), running without the agent configuration",
            lookup.group_id,
            lookup.artifact_id,
        )
        return lookup

    plugin = lookup.plugin
    config = plugin.configuration
    if config is None:
        config = ConfigNode(name="configuration")
    patch_configuration(
        config,
        java_executable=toolchain_java(toolchain_home),
        agent_flag=build_agent_flag(agent_dir),
    )
    descriptor.set_configuration(plugin, config)
    logger.debug("Patched %s:%s configuration", plugin.group_id, plugin.artifact_id)
    return lookup
