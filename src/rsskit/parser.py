"""Assemble a ``Channel`` from a stream of XML events in one forward pass.

Each ``_read_*`` function owns one open element: it is called right after the
element's ``Start`` has been consumed and returns once the matching ``End``
has been read, so the call stack mirrors the element nesting. Namespaced
elements go through :func:`rsskit.extension.read_extension_node` and are
grouped per scope; typed extensions are projected when the scope closes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterator, Optional

from .atom import AtomExtension
from .dublincore import DublinCoreExtension
from .errors import MissingFieldError, UnexpectedEOFError
from .extension import ExtensionMap, ExtensionNode, accumulate, merge_residual, read_extension_node
from .itunes import ITunesChannelExtension, ITunesItemExtension
from .model import Category, Channel, Cloud, Enclosure, Guid, Image, Item, Source, TextInput
from .namespaces import NamespaceKind, classify, local_name
from .reader import End, Event, Start, Text
from .syndication import SyndicationExtension

logger = logging.getLogger(__name__)

_REQUIRED_CHANNEL_FIELDS = ("title", "link", "description")

# element local name -> Channel attribute
_CHANNEL_TEXT_FIELDS: dict[str, str] = {
    "title": "title",
    "link": "link",
    "description": "description",
    "language": "language",
    "copyright": "copyright",
    "managingEditor": "managing_editor",
    "webMaster": "webmaster",
    "pubDate": "pub_date",
    "lastBuildDate": "last_build_date",
    "generator": "generator",
    "docs": "docs",
    "rating": "rating",
    "ttl": "ttl",
}

_ITEM_TEXT_FIELDS: dict[str, str] = {
    "title": "title",
    "link": "link",
    "description": "description",
    "author": "author",
    "comments": "comments",
    "pubDate": "pub_date",
}

# Typed extensions projected at the close of each scope.
_CHANNEL_PROJECTORS: dict[NamespaceKind, tuple[str, Callable[[dict], Any]]] = {
    NamespaceKind.ITUNES: ("itunes_ext", ITunesChannelExtension.from_map),
    NamespaceKind.DUBLIN_CORE: ("dublin_core_ext", DublinCoreExtension.from_map),
    NamespaceKind.SYNDICATION: ("syndication_ext", SyndicationExtension.from_map),
    NamespaceKind.ATOM: ("atom_ext", AtomExtension.from_map),
}

_ITEM_PROJECTORS: dict[NamespaceKind, tuple[str, Callable[[dict], Any]]] = {
    NamespaceKind.ITUNES: ("itunes_ext", ITunesItemExtension.from_map),
    NamespaceKind.DUBLIN_CORE: ("dublin_core_ext", DublinCoreExtension.from_map),
}


@dataclass
class _Scope:
    """Mutable state of the channel or item currently being assembled."""

    fields: dict[str, Any] = field(default_factory=dict)
    extensions: ExtensionMap = field(default_factory=dict)
    # kind -> local name -> nodes, waiting for their projector
    typed: dict[NamespaceKind, dict[str, list[ExtensionNode]]] = field(default_factory=dict)
    seen: set[str] = field(default_factory=set)


@dataclass
class _Options:
    include_items: bool = True
    include_extensions: bool = True


def _eof(name: str) -> UnexpectedEOFError:
    return UnexpectedEOFError(f"reached end of input inside <{name}>")


def _skip_element(events: Iterator[Event], name: str) -> None:
    depth = 0
    for event in events:
        if isinstance(event, Start):
            depth += 1
        elif isinstance(event, End):
            if depth == 0:
                return
            depth -= 1
    raise _eof(name)


def _read_text(events: Iterator[Event], name: str) -> Optional[str]:
    """Concatenated text of a leaf element; nested markup is skipped."""
    parts: list[str] = []
    for event in events:
        if isinstance(event, Text):
            parts.append(event.value)
        elif isinstance(event, Start):
            _skip_element(events, event.name)
        elif isinstance(event, End):
            return "".join(parts) if parts else None
    raise _eof(name)


def _read_children_text(events: Iterator[Event], name: str) -> dict[str, Optional[str]]:
    """Text of each direct child of a simple container (last one wins)."""
    values: dict[str, Optional[str]] = {}
    for event in events:
        if isinstance(event, Start):
            values[local_name(event.name)] = _read_text(events, event.name)
        elif isinstance(event, End):
            return values
    raise _eof(name)


def _read_list(events: Iterator[Event], name: str, child: str) -> list[str]:
    """``<skipHours><hour>1</hour>...</skipHours>`` style lists."""
    values: list[str] = []
    for event in events:
        if isinstance(event, Start):
            text = _read_text(events, event.name)
            if local_name(event.name) == child and text is not None:
                values.append(text)
        elif isinstance(event, End):
            return values
    raise _eof(name)


def _read_category(events: Iterator[Event], start: Start) -> Category:
    return Category(
        name=_read_text(events, start.name) or "",
        domain=start.attrs.get("domain"),
    )


def _read_cloud(events: Iterator[Event], start: Start) -> Cloud:
    attrs = start.attrs
    _skip_element(events, start.name)
    return Cloud(
        domain=attrs.get("domain", ""),
        port=attrs.get("port", ""),
        path=attrs.get("path", ""),
        register_procedure=attrs.get("registerProcedure", ""),
        protocol=attrs.get("protocol", ""),
    )


def _read_image(events: Iterator[Event], start: Start) -> Image:
    values = _read_children_text(events, start.name)
    return Image(
        url=values.get("url") or "",
        title=values.get("title") or "",
        link=values.get("link") or "",
        width=values.get("width"),
        height=values.get("height"),
        description=values.get("description"),
    )


def _read_text_input(events: Iterator[Event], start: Start) -> TextInput:
    values = _read_children_text(events, start.name)
    return TextInput(
        title=values.get("title") or "",
        description=values.get("description") or "",
        name=values.get("name") or "",
        link=values.get("link") or "",
    )


def _read_guid(events: Iterator[Event], start: Start) -> Guid:
    permalink = start.attrs.get("isPermaLink", "true").strip().lower() != "false"
    return Guid(value=_read_text(events, start.name) or "", permalink=permalink)


def _read_enclosure(events: Iterator[Event], start: Start) -> Enclosure:
    attrs = start.attrs
    _skip_element(events, start.name)
    return Enclosure(
        url=attrs.get("url", ""),
        length=attrs.get("length", ""),
        mime_type=attrs.get("type", ""),
    )


def _read_source(events: Iterator[Event], start: Start) -> Source:
    return Source(url=start.attrs.get("url", ""), title=_read_text(events, start.name))


def _harvest(
    events: Iterator[Event],
    start: Start,
    kind: NamespaceKind,
    scope: _Scope,
    projectors: dict,
    namespaces: dict[str, str],
    options: _Options,
) -> None:
    """Read an extension subtree and file it under the current scope."""
    # Prefixes declared below the root join the registry so the subtree can be
    # written back under a declared prefix.
    node = read_extension_node(events, start, namespaces)
    prefix = node.prefix or ""

    if kind in projectors:
        bucket = scope.typed.setdefault(kind, {})
        bucket.setdefault(node.local_name, []).append(node)
    elif options.include_extensions:
        accumulate(scope.extensions, prefix, node)


def _project(scope: _Scope, projectors: dict, options: _Options) -> None:
    """Turn the typed buckets into extension values, keeping what they ignore."""
    for kind, (attr, from_map) in projectors.items():
        entries = scope.typed.pop(kind, None)
        if not entries:
            continue
        ext = from_map(entries)
        if not ext.is_empty():
            scope.fields[attr] = ext
        if entries and options.include_extensions:
            merge_residual(scope.extensions, entries)


def _read_item(
    events: Iterator[Event],
    start: Start,
    namespaces: dict[str, str],
    options: _Options,
) -> Item:
    scope = _Scope()
    categories: list[Category] = []

    for event in events:
        if isinstance(event, End):
            _project(scope, _ITEM_PROJECTORS, options)
            return Item(
                categories=categories,
                extensions=scope.extensions,
                **scope.fields,
            )
        if not isinstance(event, Start):
            continue

        kind, _, name = classify(event.name, event.nsmap)
        if kind is NamespaceKind.CORE:
            if name in _ITEM_TEXT_FIELDS:
                scope.fields[_ITEM_TEXT_FIELDS[name]] = _read_text(events, event.name)
            elif name == "category":
                categories.append(_read_category(events, event))
            elif name == "guid":
                scope.fields["guid"] = _read_guid(events, event)
            elif name == "enclosure":
                scope.fields["enclosure"] = _read_enclosure(events, event)
            elif name == "source":
                scope.fields["source"] = _read_source(events, event)
            else:
                _skip_element(events, event.name)
        elif kind is NamespaceKind.CONTENT and name == "encoded":
            scope.fields["content"] = _read_text(events, event.name)
        else:
            _harvest(events, event, kind, scope, _ITEM_PROJECTORS, namespaces, options)

    raise _eof(start.name)


def _read_channel(
    events: Iterator[Event],
    start: Start,
    namespaces: dict[str, str],
    options: _Options,
) -> Channel:
    scope = _Scope()
    items: list[Item] = []
    categories: list[Category] = []

    for event in events:
        if isinstance(event, End):
            _project(scope, _CHANNEL_PROJECTORS, options)
            for required in _REQUIRED_CHANNEL_FIELDS:
                if required not in scope.seen:
                    raise MissingFieldError(required)
            return Channel(
                items=items,
                categories=categories,
                extensions=scope.extensions,
                namespaces=namespaces,
                **scope.fields,
            )
        if not isinstance(event, Start):
            continue

        kind, _, name = classify(event.name, event.nsmap)
        if kind is not NamespaceKind.CORE:
            _harvest(events, event, kind, scope, _CHANNEL_PROJECTORS, namespaces, options)
        elif name in _CHANNEL_TEXT_FIELDS:
            text = _read_text(events, event.name)
            if name in _REQUIRED_CHANNEL_FIELDS:
                scope.seen.add(name)
                text = text or ""
            scope.fields[_CHANNEL_TEXT_FIELDS[name]] = text
        elif name == "item":
            if options.include_items:
                items.append(_read_item(events, event, namespaces, options))
            else:
                _skip_element(events, event.name)
        elif name == "category":
            categories.append(_read_category(events, event))
        elif name == "image":
            scope.fields["image"] = _read_image(events, event)
        elif name == "cloud":
            scope.fields["cloud"] = _read_cloud(events, event)
        elif name == "textInput":
            scope.fields["text_input"] = _read_text_input(events, event)
        elif name == "skipHours":
            scope.fields["skip_hours"] = _read_list(events, event.name, "hour")
        elif name == "skipDays":
            scope.fields["skip_days"] = _read_list(events, event.name, "day")
        else:
            _skip_element(events, event.name)

    raise _eof(start.name)


def read_channel(
    events: Iterator[Event],
    *,
    include_items: bool = True,
    include_extensions: bool = True,
) -> Channel:
    """Seek the first ``<channel>`` and assemble it.

    The namespace declarations of the document's root element seed the
    channel's namespace registry. Parsing stops at ``</channel>``; anything
    after it is never read.
    """
    options = _Options(include_items=include_items, include_extensions=include_extensions)
    namespaces: Optional[dict[str, str]] = None

    for event in events:
        if not isinstance(event, Start):
            continue
        if namespaces is None:
            namespaces = dict(event.nsmap)
        if local_name(event.name) == "channel":
            channel = _read_channel(events, event, namespaces, options)
            logger.debug(
                "Parsed channel %r with %d items and %d extension namespaces",
                channel.title,
                len(channel.items),
                len(channel.extensions),
            )
            return channel

    raise UnexpectedEOFError()
