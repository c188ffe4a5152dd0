from __future__ import annotations

import logging
from typing import IO, TYPE_CHECKING, Iterable, Mapping, Optional
from xml.sax.saxutils import XMLGenerator

from .namespaces import FIXED_PREFIXES, NamespaceKind, namespace_kind, split_name

if TYPE_CHECKING:
    from .model import Channel

logger = logging.getLogger(__name__)


class XmlEventWriter:
    """Push-style XML output: start/end/empty/text events, escaping included.

    Elements that receive neither text nor children are closed as ``<name/>``.
    ``prefix_renames`` only applies to generic extension data, see
    :meth:`extension_name`.
    """

    def __init__(
        self,
        sink: IO[bytes],
        encoding: str = "utf-8",
        prefix_renames: Optional[Mapping[str, str]] = None,
    ):
        self._generator = XMLGenerator(sink, encoding=encoding, short_empty_elements=True)
        self._prefix_renames = dict(prefix_renames or {})

    def extension_name(self, name: str) -> str:
        """The name a generic extension element or attribute is written under."""
        prefix, local = split_name(name)
        renamed = self._prefix_renames.get(prefix) if prefix else None
        return f"{renamed}:{local}" if renamed else name

    def start_document(self) -> None:
        self._generator.startDocument()

    def end_document(self) -> None:
        self._generator.endDocument()

    def start(self, name: str, attrs: Optional[Mapping[str, str]] = None) -> None:
        self._generator.startElement(name, dict(attrs) if attrs else {})

    def end(self, name: str) -> None:
        self._generator.endElement(name)

    def empty(self, name: str, attrs: Optional[Mapping[str, str]] = None) -> None:
        self.start(name, attrs)
        self.end(name)

    def text(self, value: str) -> None:
        self._generator.characters(value)

    def text_element(self, name: str, value: str) -> None:
        self.start(name)
        self.text(value)
        self.end(name)

    def optional_text_element(self, name: str, value: Optional[str]) -> None:
        if value is not None:
            self.text_element(name, value)

    def text_elements(self, name: str, values: Iterable[str]) -> None:
        for value in values:
            self.text_element(name, value)


def _extension_written(ext) -> bool:
    return ext is not None and not ext.is_empty()


def _required_kinds(channel: Channel) -> list[NamespaceKind]:
    kinds: list[NamespaceKind] = []
    if any(item.content is not None for item in channel.items):
        kinds.append(NamespaceKind.CONTENT)
    if _extension_written(channel.itunes_ext) or any(
        _extension_written(item.itunes_ext) for item in channel.items
    ):
        kinds.append(NamespaceKind.ITUNES)
    if _extension_written(channel.dublin_core_ext) or any(
        _extension_written(item.dublin_core_ext) for item in channel.items
    ):
        kinds.append(NamespaceKind.DUBLIN_CORE)
    if _extension_written(channel.syndication_ext):
        kinds.append(NamespaceKind.SYNDICATION)
    if _extension_written(channel.atom_ext):
        kinds.append(NamespaceKind.ATOM)
    return kinds


def _fresh_prefix(prefix: str, taken: set[str]) -> str:
    counter = 1
    while f"{prefix}{counter}" in taken:
        counter += 1
    return f"{prefix}{counter}"


def _used_prefixes(channel: Channel) -> set[str]:
    used = set(channel.namespaces)
    used.update(channel.extensions)
    for item in channel.items:
        used.update(item.extensions)
    return used


def collect_namespaces(channel: Channel) -> tuple[dict[str, str], dict[str, str]]:
    """Namespace declarations for the root element, plus generic prefix renames.

    The channel's registry comes first, in its own order, followed by the
    fixed prefixes of every typed extension that will emit something. When
    the registry binds a fixed prefix to an unrelated URI, the fixed binding
    takes the prefix and the registry's URI moves to a fresh one (``itunes1``,
    ``itunes2``, ...). The second mapping records those moves so generic
    elements are written under the new prefix and keep their namespace.
    """
    namespaces = dict(channel.namespaces)
    renames: dict[str, str] = {}
    taken: Optional[set[str]] = None
    for kind in _required_kinds(channel):
        prefix, uri = FIXED_PREFIXES[kind]
        existing = namespaces.get(prefix)
        if existing is None:
            namespaces[prefix] = uri
        elif namespace_kind(existing) is not kind:
            if taken is None:
                taken = _used_prefixes(channel)
            fresh = _fresh_prefix(prefix, taken)
            taken.add(fresh)
            logger.warning(
                "Namespace prefix %r is bound to %r, moving it to %r to make room for %s data",
                prefix,
                existing,
                fresh,
                kind.value,
            )
            renames[prefix] = fresh
            namespaces[prefix] = uri
            namespaces[fresh] = existing
    return namespaces, renames


def write_channel(channel: Channel, sink: IO[bytes]) -> None:
    namespaces, renames = collect_namespaces(channel)
    writer = XmlEventWriter(sink, prefix_renames=renames)
    attrs = {"version": "2.0"}
    for prefix, uri in namespaces.items():
        attrs[f"xmlns:{prefix}"] = uri

    writer.start_document()
    writer.start("rss", attrs)
    channel.to_xml(writer)
    writer.end("rss")
    writer.end_document()
