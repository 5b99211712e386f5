"""Build descriptor model and configuration tree."""

from native_maven.descriptor.model import (
    BuildDescriptor,
    PluginDeclaration,
    PluginFound,
    PluginLookup,
    PluginNotFound,
)
from native_maven.descriptor.tree import ConfigNode

__all__ = [
    "BuildDescriptor",
    "ConfigNode",
    "PluginDeclaration",
    "PluginFound",
    "PluginLookup",
    "PluginNotFound",
]
