from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterator, Optional

from .errors import UnexpectedEOFError
from .namespaces import split_name
from .reader import End, Event, Start, Text

if TYPE_CHECKING:
    from .writer import XmlEventWriter


@dataclass
class ExtensionNode:
    """One namespaced element kept as a raw tree.

    ``children`` groups child elements by their local name, each list in
    document order, so repeated tags keep both their multiplicity and order.
    """

    name: str = ""
    value: Optional[str] = None
    attrs: dict[str, str] = field(default_factory=dict)
    children: dict[str, list[ExtensionNode]] = field(default_factory=dict)

    @property
    def prefix(self) -> Optional[str]:
        return split_name(self.name)[0]

    @property
    def local_name(self) -> str:
        return split_name(self.name)[1]

    def to_xml(self, writer: XmlEventWriter) -> None:
        name = writer.extension_name(self.name)
        writer.start(name, {writer.extension_name(key): value for key, value in self.attrs.items()})
        if self.value is not None:
            writer.text(self.value)
        for nodes in self.children.values():
            for node in nodes:
                node.to_xml(writer)
        writer.end(name)


# prefix -> local name -> nodes, in document order
ExtensionMap = dict[str, dict[str, list[ExtensionNode]]]


def _record_bindings(start: Start, bindings: dict[str, str]) -> None:
    """Add the in-scope URI of every prefix ``start`` uses to ``bindings``."""
    for name in (start.name, *start.attrs):
        prefix = split_name(name)[0]
        if prefix is None or prefix == "xml" or prefix in bindings:
            continue
        uri = start.nsmap.get(prefix)
        if uri is not None:
            bindings[prefix] = uri


def read_extension_node(
    events: Iterator[Event],
    start: Start,
    bindings: Optional[dict[str, str]] = None,
) -> ExtensionNode:
    """Consume the subtree opened by ``start`` and return it as a node.

    ``events`` must be positioned right after ``start``. Returns once the
    matching end tag has been read. When ``bindings`` is given, every prefix
    used by an element or attribute of the subtree that is not in it yet is
    added with the URI it resolved to.
    """
    if bindings is not None:
        _record_bindings(start, bindings)
    node = ExtensionNode(attrs=dict(start.attrs))
    text: list[str] = []

    for event in events:
        if isinstance(event, Start):
            child = read_extension_node(events, event, bindings)
            node.children.setdefault(child.local_name, []).append(child)
        elif isinstance(event, Text):
            text.append(event.value)
        elif isinstance(event, End):
            node.name = event.name
            node.value = "".join(text) if text else None
            return node

    raise UnexpectedEOFError(f"reached end of input inside <{start.name}>")


def accumulate(extensions: ExtensionMap, key: str, node: ExtensionNode) -> None:
    extensions.setdefault(key, {}).setdefault(node.local_name, []).append(node)


def merge_residual(extensions: ExtensionMap, residual: dict[str, list[ExtensionNode]]) -> None:
    """File nodes a typed projector left behind under the prefix they were written with."""
    for nodes in residual.values():
        for node in nodes:
            accumulate(extensions, node.prefix or "", node)


def first_extension_value(entries: dict[str, list[ExtensionNode]], key: str) -> Optional[str]:
    nodes = entries.get(key)
    if not nodes:
        return None
    return nodes[0].value


def remove_extension_value(entries: dict[str, list[ExtensionNode]], key: str) -> Optional[str]:
    """Remove ``key`` and return the text of its first occurrence."""
    nodes = entries.pop(key, None)
    if not nodes:
        return None
    return nodes[0].value


def remove_extension_values(entries: dict[str, list[ExtensionNode]], key: str) -> list[str]:
    """Remove ``key`` and return the text of every occurrence that has some."""
    nodes = entries.pop(key, None) or []
    return [node.value for node in nodes if node.value is not None]
