"""Atom links embedded in an RSS channel (``atom:link``)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .extension import ExtensionNode
from .namespaces import ATOM_NAMESPACE

if TYPE_CHECKING:
    from .writer import XmlEventWriter

NAMESPACE = ATOM_NAMESPACE


@dataclass
class AtomLink:
    href: str = ""
    rel: str = "alternate"
    hreflang: Optional[str] = None
    mime_type: Optional[str] = None
    title: Optional[str] = None
    length: Optional[str] = None

    def to_xml(self, writer: XmlEventWriter) -> None:
        attrs = {"href": self.href, "rel": self.rel}
        if self.hreflang is not None:
            attrs["hreflang"] = self.hreflang
        if self.mime_type is not None:
            attrs["type"] = self.mime_type
        if self.title is not None:
            attrs["title"] = self.title
        if self.length is not None:
            attrs["length"] = self.length
        writer.empty("atom:link", attrs)


@dataclass
class AtomExtension:
    links: list[AtomLink] = field(default_factory=list)

    @classmethod
    def from_map(cls, entries: dict[str, list[ExtensionNode]]) -> AtomExtension:
        links = []
        for node in entries.pop("link", None) or []:
            attrs = node.attrs
            href = attrs.get("href")
            if href is None:
                continue
            links.append(
                AtomLink(
                    href=href,
                    rel=attrs.get("rel", "alternate"),
                    hreflang=attrs.get("hreflang"),
                    mime_type=attrs.get("type"),
                    title=attrs.get("title"),
                    length=attrs.get("length"),
                )
            )
        return cls(links=links)

    def is_empty(self) -> bool:
        return not self.links

    def to_xml(self, writer: XmlEventWriter) -> None:
        for link in self.links:
            link.to_xml(writer)
