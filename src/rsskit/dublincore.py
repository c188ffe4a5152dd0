"""Dublin Core (``dc:*``) metadata. Every element may repeat."""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import TYPE_CHECKING

from .extension import ExtensionNode, remove_extension_values
from .namespaces import DUBLIN_CORE_NAMESPACE

if TYPE_CHECKING:
    from .writer import XmlEventWriter

NAMESPACE = DUBLIN_CORE_NAMESPACE

# attribute name -> dc element name, in output order
_ELEMENTS: dict[str, str] = {
    "contributors": "contributor",
    "coverages": "coverage",
    "creators": "creator",
    "dates": "date",
    "descriptions": "description",
    "formats": "format",
    "identifiers": "identifier",
    "languages": "language",
    "publishers": "publisher",
    "relations": "relation",
    "rights": "rights",
    "sources": "source",
    "subjects": "subject",
    "titles": "title",
    "resource_types": "type",
}


@dataclass
class DublinCoreExtension:
    contributors: list[str] = field(default_factory=list)
    coverages: list[str] = field(default_factory=list)
    creators: list[str] = field(default_factory=list)
    dates: list[str] = field(default_factory=list)
    descriptions: list[str] = field(default_factory=list)
    formats: list[str] = field(default_factory=list)
    identifiers: list[str] = field(default_factory=list)
    languages: list[str] = field(default_factory=list)
    publishers: list[str] = field(default_factory=list)
    relations: list[str] = field(default_factory=list)
    rights: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    subjects: list[str] = field(default_factory=list)
    titles: list[str] = field(default_factory=list)
    resource_types: list[str] = field(default_factory=list)

    @classmethod
    def from_map(cls, entries: dict[str, list[ExtensionNode]]) -> DublinCoreExtension:
        return cls(
            **{
                attr: remove_extension_values(entries, element)
                for attr, element in _ELEMENTS.items()
            }
        )

    def is_empty(self) -> bool:
        return not any(getattr(self, f.name) for f in fields(self))

    def to_xml(self, writer: XmlEventWriter) -> None:
        for attr, element in _ELEMENTS.items():
            writer.text_elements(f"dc:{element}", getattr(self, attr))
