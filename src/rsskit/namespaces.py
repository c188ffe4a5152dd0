from __future__ import annotations

import enum
from typing import Mapping, NamedTuple, Optional

ITUNES_NAMESPACE = "http://www.itunes.com/dtds/podcast-1.0.dtd"
DUBLIN_CORE_NAMESPACE = "http://purl.org/dc/elements/1.1/"
ATOM_NAMESPACE = "http://www.w3.org/2005/Atom"
SYNDICATION_NAMESPACE = "http://purl.org/rss/1.0/modules/syndication/"
CONTENT_NAMESPACE = "http://purl.org/rss/1.0/modules/content/"

_ITUNES_NAMESPACE_LOWER = ITUNES_NAMESPACE.lower()

# Prefixes that never denote an extension, even when written out.
_CORE_PREFIXES = frozenset(("rss", "rdf"))


class NamespaceKind(enum.Enum):
    CORE = "core"
    ITUNES = "itunes"
    DUBLIN_CORE = "dublin_core"
    ATOM = "atom"
    SYNDICATION = "syndication"
    CONTENT = "content"
    GENERIC = "generic"


# Prefix/URI pairs the writer uses for typed extensions.
FIXED_PREFIXES: dict[NamespaceKind, tuple[str, str]] = {
    NamespaceKind.CONTENT: ("content", CONTENT_NAMESPACE),
    NamespaceKind.ITUNES: ("itunes", ITUNES_NAMESPACE),
    NamespaceKind.DUBLIN_CORE: ("dc", DUBLIN_CORE_NAMESPACE),
    NamespaceKind.SYNDICATION: ("sy", SYNDICATION_NAMESPACE),
    NamespaceKind.ATOM: ("atom", ATOM_NAMESPACE),
}

_EXACT_NAMESPACES: dict[str, NamespaceKind] = {
    DUBLIN_CORE_NAMESPACE: NamespaceKind.DUBLIN_CORE,
    ATOM_NAMESPACE: NamespaceKind.ATOM,
    SYNDICATION_NAMESPACE: NamespaceKind.SYNDICATION,
    CONTENT_NAMESPACE: NamespaceKind.CONTENT,
}


class Classification(NamedTuple):
    kind: NamespaceKind
    prefix: Optional[str]
    local: str


def split_name(name: str) -> tuple[Optional[str], str]:
    """Split ``prefix:local`` on the first colon. Unprefixed names get ``None``."""
    prefix, sep, local = name.partition(":")
    if not sep:
        return None, name
    if not prefix:
        return None, local
    return prefix, local


def local_name(name: str) -> str:
    return split_name(name)[1]


def namespace_kind(uri: Optional[str]) -> NamespaceKind:
    """Map a namespace URI onto the extension it carries, if any."""
    if uri is None:
        return NamespaceKind.GENERIC
    kind = _EXACT_NAMESPACES.get(uri)
    if kind is not None:
        return kind
    if uri.lower() == _ITUNES_NAMESPACE_LOWER:
        return NamespaceKind.ITUNES
    return NamespaceKind.GENERIC


def classify(name: str, nsmap: Mapping[str, str]) -> Classification:
    """Decide which extension, if any, a qualified element name belongs to.

    ``nsmap`` holds the prefix bindings in scope at the element. A prefix that
    is not bound anywhere still classifies as generic, keyed by its raw text,
    because plenty of real feeds forget to declare what they use.
    """
    prefix, local = split_name(name)
    if prefix is None or prefix in _CORE_PREFIXES:
        return Classification(NamespaceKind.CORE, prefix, local)
    return Classification(namespace_kind(nsmap.get(prefix)), prefix, local)
