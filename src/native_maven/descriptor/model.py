"""Maven build descriptor (``pom.xml``) loading, lookup and serialization."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from xml.etree import ElementTree

from defusedxml import DefusedXmlException
from defusedxml import ElementTree as SafeElementTree

from native_maven.descriptor.tree import ConfigNode, local_name, namespace_of, qualified_name
from native_maven.errors import DescriptorParseError, DescriptorWriteError

DEFAULT_PLUGIN_GROUP_ID = "org.apache.maven.plugins"
logger = logging.getLogger(__name__)


@dataclass(slots=True)
class PluginDeclaration:
    """One ``<build><plugins><plugin>`` entry."""

    group_id: str
    artifact_id: str
    configuration: ConfigNode | None
    element: ElementTree.Element

    def matches(self, group_id: str, artifact_id: str) -> bool:
        return (
            self.group_id.casefold() == group_id.casefold()
            and self.artifact_id.casefold() == artifact_id.casefold()
        )


@dataclass(slots=True, frozen=True)
class PluginFound:
    plugin: PluginDeclaration


@dataclass(slots=True, frozen=True)
class PluginNotFound:
    group_id: str
    artifact_id: str


PluginLookup = PluginFound | PluginNotFound


class BuildDescriptor:
    """In-memory build descriptor; everything not touched is written back as read."""

    def __init__(self, tree: ElementTree.ElementTree) -> None:
        self._tree = tree
        self._root = tree.getroot()
        self._namespace = namespace_of(self._root.tag)

    @classmethod
    def load(cls, path: Path) -> BuildDescriptor:
        parser = SafeElementTree.XMLParser(target=ElementTree.TreeBuilder(insert_comments=True))
        try:
            tree = SafeElementTree.parse(str(path), parser=parser)
        except FileNotFoundError as error:
            raise DescriptorParseError(f"Build descriptor not found: {path}") from error
        except OSError as error:
            raise DescriptorParseError(f"Cannot read build descriptor {path}: {error}") from error
        except (ElementTree.ParseError, DefusedXmlException) as error:
            raise DescriptorParseError(f"Malformed build descriptor {path}: {error}") from error

        root = tree.getroot()
        if local_name(root.tag) != "project":
            raise DescriptorParseError(
                f"Unexpected root element <{local_name(root.tag)}> in {path}, expected <project>",
            )
        logger.debug("Loaded build descriptor %s", path)
        return cls(tree)

    @property
    def namespace(self) -> str | None:
        return self._namespace

    def plugins(self) -> list[PluginDeclaration]:
        plugins_element = self._path_element("build", "plugins")
        if plugins_element is None:
            return []
        return [
            self._declaration(element)
            for element in plugins_element.findall(self._qname("plugin"))
        ]

    def find_plugin(self, group_id: str, artifact_id: str) -> PluginLookup:
        """Find a plugin by its identifiers, ignoring case."""

        for plugin in self.plugins():
            if plugin.matches(group_id, artifact_id):
                return PluginFound(plugin)
        return PluginNotFound(group_id=group_id, artifact_id=artifact_id)

    def set_configuration(self, plugin: PluginDeclaration, configuration: ConfigNode) -> None:
        """Replace the plugin's ``<configuration>`` in place, or append one."""

        replacement = configuration.to_element(self._namespace)
        current = plugin.element.find(self._qname("configuration"))
        if current is None:
            plugin.element.append(replacement)
        else:
            index = list(plugin.element).index(current)
            plugin.element.remove(current)
            plugin.element.insert(index, replacement)
        plugin.configuration = configuration

    def write(self, path: Path) -> None:
        if self._namespace:
            # Serialize the POM namespace as the default one, attributes stay unprefixed.
            ElementTree.register_namespace("", self._namespace)
        ElementTree.indent(self._tree, space="    ")
        try:
            self._tree.write(str(path), encoding="UTF-8", xml_declaration=True)
        except (OSError, ValueError, TypeError) as error:
            raise DescriptorWriteError(f"Cannot write build descriptor {path}: {error}") from error
        logger.debug("Wrote build descriptor %s", path)

    def _declaration(self, element: ElementTree.Element) -> PluginDeclaration:
        configuration = element.find(self._qname("configuration"))
        return PluginDeclaration(
            group_id=self._text(element, "groupId") or DEFAULT_PLUGIN_GROUP_ID,
            artifact_id=self._text(element, "artifactId") or "",
            configuration=(
                ConfigNode.from_element(configuration) if configuration is not None else None
            ),
            element=element,
        )

    def _path_element(self, *names: str) -> ElementTree.Element | None:
        current: ElementTree.Element | None = self._root
        for name in names:
            if current is None:
                return None
            current = current.find(self._qname(name))
        return current

    def _text(self, element: ElementTree.Element, name: str) -> str | None:
        child = element.find(self._qname(name))
        if child is None or child.text is None:
            return None
        return child.text.strip() or None

    def _qname(self, name: str) -> str:
        return qualified_name(name, self._namespace)
