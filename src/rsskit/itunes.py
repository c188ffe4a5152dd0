"""iTunes podcast extension (``itunes:*``) for channels and items."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Optional

from .extension import ExtensionNode, remove_extension_value
from .namespaces import ITUNES_NAMESPACE

if TYPE_CHECKING:
    from .writer import XmlEventWriter

NAMESPACE = ITUNES_NAMESPACE

_Entries = dict[str, list[ExtensionNode]]


@dataclass
class ITunesCategory:
    text: str = ""
    subcategory: Optional[ITunesCategory] = None

    def to_xml(self, writer: XmlEventWriter) -> None:
        writer.start("itunes:category", {"text": self.text})
        if self.subcategory is not None:
            self.subcategory.to_xml(writer)
        writer.end("itunes:category")


@dataclass
class ITunesOwner:
    name: Optional[str] = None
    email: Optional[str] = None

    def to_xml(self, writer: XmlEventWriter) -> None:
        writer.start("itunes:owner")
        writer.optional_text_element("itunes:name", self.name)
        writer.optional_text_element("itunes:email", self.email)
        writer.end("itunes:owner")


def _pop_first(entries: _Entries, key: str) -> Optional[ExtensionNode]:
    # Only the first occurrence counts; any further ones are dropped.
    nodes = entries.pop(key, None)
    return nodes[0] if nodes else None


def _parse_image(entries: _Entries) -> Optional[str]:
    node = _pop_first(entries, "image")
    if node is None:
        return None
    return node.attrs.get("href")


def _parse_owner(entries: _Entries) -> Optional[ITunesOwner]:
    node = _pop_first(entries, "owner")
    if node is None:
        return None
    return ITunesOwner(
        name=remove_extension_value(node.children, "name"),
        email=remove_extension_value(node.children, "email"),
    )


def _parse_categories(entries: _Entries) -> list[ITunesCategory]:
    categories: list[ITunesCategory] = []
    for node in entries.pop("category", None) or []:
        subcategory = None
        child = _pop_first(node.children, "category")
        if child is not None:
            subcategory = ITunesCategory(text=child.attrs.get("text", ""))
        categories.append(ITunesCategory(text=node.attrs.get("text", ""), subcategory=subcategory))
    return categories


@dataclass
class ITunesChannelExtension:
    author: Optional[str] = None
    block: Optional[str] = None
    categories: list[ITunesCategory] = field(default_factory=list)
    image: Optional[str] = None
    explicit: Optional[str] = None
    complete: Optional[str] = None
    new_feed_url: Optional[str] = None
    owner: Optional[ITunesOwner] = None
    subtitle: Optional[str] = None
    summary: Optional[str] = None
    keywords: Optional[str] = None
    type: Optional[str] = None

    @classmethod
    def from_map(cls, entries: _Entries) -> ITunesChannelExtension:
        """Project the channel's ``itunes:*`` elements, removing the keys used."""
        return cls(
            author=remove_extension_value(entries, "author"),
            block=remove_extension_value(entries, "block"),
            categories=_parse_categories(entries),
            image=_parse_image(entries),
            explicit=remove_extension_value(entries, "explicit"),
            complete=remove_extension_value(entries, "complete"),
            new_feed_url=remove_extension_value(entries, "new-feed-url"),
            owner=_parse_owner(entries),
            subtitle=remove_extension_value(entries, "subtitle"),
            summary=remove_extension_value(entries, "summary"),
            keywords=remove_extension_value(entries, "keywords"),
            type=remove_extension_value(entries, "type"),
        )

    def is_empty(self) -> bool:
        return self == ITunesChannelExtension()

    def to_xml(self, writer: XmlEventWriter) -> None:
        writer.optional_text_element("itunes:author", self.author)
        writer.optional_text_element("itunes:block", self.block)
        for category in self.categories:
            category.to_xml(writer)
        if self.image is not None:
            writer.empty("itunes:image", {"href": self.image})
        writer.optional_text_element("itunes:explicit", self.explicit)
        writer.optional_text_element("itunes:complete", self.complete)
        writer.optional_text_element("itunes:new-feed-url", self.new_feed_url)
        if self.owner is not None:
            self.owner.to_xml(writer)
        writer.optional_text_element("itunes:subtitle", self.subtitle)
        writer.optional_text_element("itunes:summary", self.summary)
        writer.optional_text_element("itunes:keywords", self.keywords)
        writer.optional_text_element("itunes:type", self.type)


@dataclass
class ITunesItemExtension:
    author: Optional[str] = None
    block: Optional[str] = None
    image: Optional[str] = None
    duration: Optional[str] = None
    explicit: Optional[str] = None
    closed_captioned: Optional[str] = None
    order: Optional[str] = None
    subtitle: Optional[str] = None
    summary: Optional[str] = None
    keywords: Optional[str] = None
    episode: Optional[str] = None
    season: Optional[str] = None
    episode_type: Optional[str] = None

    @classmethod
    def from_map(cls, entries: _Entries) -> ITunesItemExtension:
        """Project an item's ``itunes:*`` elements, removing the keys used."""
        return cls(
            author=remove_extension_value(entries, "author"),
            block=remove_extension_value(entries, "block"),
            image=_parse_image(entries),
            duration=remove_extension_value(entries, "duration"),
            explicit=remove_extension_value(entries, "explicit"),
            closed_captioned=remove_extension_value(entries, "isClosedCaptioned"),
            order=remove_extension_value(entries, "order"),
            subtitle=remove_extension_value(entries, "subtitle"),
            summary=remove_extension_value(entries, "summary"),
            keywords=remove_extension_value(entries, "keywords"),
            episode=remove_extension_value(entries, "episode"),
            season=remove_extension_value(entries, "season"),
            episode_type=remove_extension_value(entries, "episodeType"),
        )

    def is_empty(self) -> bool:
        return self == ITunesItemExtension()

    def to_xml(self, writer: XmlEventWriter) -> None:
        writer.optional_text_element("itunes:author", self.author)
        writer.optional_text_element("itunes:block", self.block)
        if self.image is not None:
            writer.empty("itunes:image", {"href": self.image})
        writer.optional_text_element("itunes:duration", self.duration)
        writer.optional_text_element("itunes:explicit", self.explicit)
        writer.optional_text_element("itunes:isClosedCaptioned", self.closed_captioned)
        writer.optional_text_element("itunes:order", self.order)
        writer.optional_text_element("itunes:subtitle", self.subtitle)
        writer.optional_text_element("itunes:summary", self.summary)
        writer.optional_text_element("itunes:keywords", self.keywords)
        writer.optional_text_element("itunes:episode", self.episode)
        writer.optional_text_element("itunes:season", self.season)
        writer.optional_text_element("itunes:episodeType", self.episode_type)
