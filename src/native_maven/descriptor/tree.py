"""Plain configuration tree mirroring a generic XML element."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from xml.etree import ElementTree


@dataclass(slots=True)
class ConfigNode:
    """Named node with an optional scalar value and ordered children."""

    name: str
    value: str | None = None
    children: list[ConfigNode] = field(default_factory=list)
    attributes: dict[str, str] = field(default_factory=dict)

    @classmethod
    def leaf(cls, name: str, value: str) -> ConfigNode:
        return cls(name=name, value=value)

    def child(self, name: str) -> ConfigNode | None:
        """Return the first direct child called ``name``."""

        return self.find_child(lambda node: node.name == name)

    def find_child(self, predicate: Callable[[ConfigNode], bool]) -> ConfigNode | None:
        for node in self.children:
            if predicate(node):
                return node
        return None

    def add_child(self, node: ConfigNode) -> ConfigNode:
        self.children.append(node)
        return node

    def get_or_create_child(self, name: str) -> ConfigNode:
        existing = self.child(name)
        if existing is not None:
            return existing
        return self.add_child(ConfigNode(name=name))

    @classmethod
    def from_element(cls, element: ElementTree.Element) -> ConfigNode:
        """Build a tree from an XML element, dropping namespaces and comments.

        Attributes are kept verbatim; whitespace-only text counts as no value.
        """

        text = element.text.strip() if element.text else ""
        return cls(
            name=local_name(element.tag),
            value=text or None,
            children=[
                cls.from_element(child) for child in element if isinstance(child.tag, str)
            ],
            attributes=dict(element.attrib),
        )

    def to_element(self, namespace: str | None = None) -> ElementTree.Element:
        element = ElementTree.Element(qualified_name(self.name, namespace), dict(self.attributes))
        if self.value is not None:
            element.text = self.value
        for node in self.children:
            element.append(node.to_element(namespace))
        return element


def local_name(tag: str) -> str:
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag


def namespace_of(tag: str) -> str | None:
    if tag.startswith("{"):
        return tag[1:].split("}", 1)[0]
    return None


def qualified_name(name: str, namespace: str | None) -> str:
    if namespace:
        return f"{{{namespace}}}{name}"
    return name
