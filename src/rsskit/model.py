from __future__ import annotations

from dataclasses import dataclass, field
from typing import IO, TYPE_CHECKING, Optional, Union

from .atom import AtomExtension
from .dublincore import DublinCoreExtension
from .extension import ExtensionMap
from .itunes import ITunesChannelExtension, ITunesItemExtension
from .syndication import SyndicationExtension

if TYPE_CHECKING:
    from .writer import XmlEventWriter


def _write_extensions(writer: XmlEventWriter, extensions: ExtensionMap) -> None:
    for entries in extensions.values():
        for nodes in entries.values():
            for node in nodes:
                node.to_xml(writer)


@dataclass
class Category:
    name: str = ""
    domain: Optional[str] = None

    def to_xml(self, writer: XmlEventWriter) -> None:
        attrs = {"domain": self.domain} if self.domain is not None else None
        writer.start("category", attrs)
        writer.text(self.name)
        writer.end("category")


@dataclass
class Cloud:
    domain: str = ""
    port: str = ""
    path: str = ""
    register_procedure: str = ""
    protocol: str = ""

    def to_xml(self, writer: XmlEventWriter) -> None:
        writer.empty(
            "cloud",
            {
                "domain": self.domain,
                "port": self.port,
                "path": self.path,
                "registerProcedure": self.register_procedure,
                "protocol": self.protocol,
            },
        )


@dataclass
class Enclosure:
    url: str = ""
    length: str = ""
    mime_type: str = ""

    def to_xml(self, writer: XmlEventWriter) -> None:
        writer.empty(
            "enclosure",
            {"url": self.url, "length": self.length, "type": self.mime_type},
        )


@dataclass
class Guid:
    value: str = ""
    permalink: bool = True

    def to_xml(self, writer: XmlEventWriter) -> None:
        attrs = None if self.permalink else {"isPermaLink": "false"}
        writer.start("guid", attrs)
        writer.text(self.value)
        writer.end("guid")


@dataclass
class Image:
    url: str = ""
    title: str = ""
    link: str = ""
    width: Optional[str] = None
    height: Optional[str] = None
    description: Optional[str] = None

    def to_xml(self, writer: XmlEventWriter) -> None:
        writer.start("image")
        writer.text_element("url", self.url)
        writer.text_element("title", self.title)
        writer.text_element("link", self.link)
        writer.optional_text_element("width", self.width)
        writer.optional_text_element("height", self.height)
        writer.optional_text_element("description", self.description)
        writer.end("image")


@dataclass
class Source:
    url: str = ""
    title: Optional[str] = None

    def to_xml(self, writer: XmlEventWriter) -> None:
        writer.start("source", {"url": self.url})
        if self.title is not None:
            writer.text(self.title)
        writer.end("source")


@dataclass
class TextInput:
    title: str = ""
    description: str = ""
    name: str = ""
    link: str = ""

    def to_xml(self, writer: XmlEventWriter) -> None:
        writer.start("textInput")
        writer.text_element("title", self.title)
        writer.text_element("description", self.description)
        writer.text_element("name", self.name)
        writer.text_element("link", self.link)
        writer.end("textInput")


@dataclass
class Item:
    """A single ``<item>``. Every field is optional."""

    title: Optional[str] = None
    link: Optional[str] = None
    description: Optional[str] = None
    author: Optional[str] = None
    categories: list[Category] = field(default_factory=list)
    comments: Optional[str] = None
    enclosure: Optional[Enclosure] = None
    guid: Optional[Guid] = None
    pub_date: Optional[str] = None
    source: Optional[Source] = None
    content: Optional[str] = None
    extensions: ExtensionMap = field(default_factory=dict)
    itunes_ext: Optional[ITunesItemExtension] = None
    dublin_core_ext: Optional[DublinCoreExtension] = None

    def to_xml(self, writer: XmlEventWriter) -> None:
        writer.start("item")
        writer.optional_text_element("title", self.title)
        writer.optional_text_element("link", self.link)
        writer.optional_text_element("description", self.description)
        writer.optional_text_element("author", self.author)
        writer.optional_text_element("comments", self.comments)
        writer.optional_text_element("pubDate", self.pub_date)
        writer.optional_text_element("content:encoded", self.content)
        for category in self.categories:
            category.to_xml(writer)
        if self.guid is not None:
            self.guid.to_xml(writer)
        if self.enclosure is not None:
            self.enclosure.to_xml(writer)
        if self.source is not None:
            self.source.to_xml(writer)
        if self.itunes_ext is not None:
            self.itunes_ext.to_xml(writer)
        if self.dublin_core_ext is not None:
            self.dublin_core_ext.to_xml(writer)
        _write_extensions(writer, self.extensions)
        writer.end("item")


@dataclass
class Channel:
    """An RSS 2.0 channel: feed metadata, its items and any extensions.

    ``namespaces`` maps prefixes to URIs and is reproduced on the root element
    when the channel is written, so generic extensions stay resolvable.
    """

    title: str = ""
    link: str = ""
    description: str = ""
    language: Optional[str] = None
    copyright: Optional[str] = None
    managing_editor: Optional[str] = None
    webmaster: Optional[str] = None
    pub_date: Optional[str] = None
    last_build_date: Optional[str] = None
    categories: list[Category] = field(default_factory=list)
    generator: Optional[str] = None
    docs: Optional[str] = None
    cloud: Optional[Cloud] = None
    rating: Optional[str] = None
    ttl: Optional[str] = None
    image: Optional[Image] = None
    text_input: Optional[TextInput] = None
    skip_hours: list[str] = field(default_factory=list)
    skip_days: list[str] = field(default_factory=list)
    items: list[Item] = field(default_factory=list)
    extensions: ExtensionMap = field(default_factory=dict)
    itunes_ext: Optional[ITunesChannelExtension] = None
    dublin_core_ext: Optional[DublinCoreExtension] = None
    syndication_ext: Optional[SyndicationExtension] = None
    atom_ext: Optional[AtomExtension] = None
    namespaces: dict[str, str] = field(default_factory=dict)

    @classmethod
    def read_from(cls, source: Union[str, bytes, IO[bytes]], **options) -> Channel:
        from .main import parse

        return parse(source, **options)

    def write_to(self, sink: IO[bytes]) -> None:
        from .main import write

        write(self, sink)

    def to_bytes(self) -> bytes:
        from .main import write

        return write(self)

    def to_xml(self, writer: XmlEventWriter) -> None:
        writer.start("channel")
        writer.text_element("title", self.title)
        writer.text_element("link", self.link)
        writer.text_element("description", self.description)
        for item in self.items:
            item.to_xml(writer)
        writer.optional_text_element("language", self.language)
        writer.optional_text_element("copyright", self.copyright)
        writer.optional_text_element("managingEditor", self.managing_editor)
        writer.optional_text_element("webMaster", self.webmaster)
        writer.optional_text_element("pubDate", self.pub_date)
        writer.optional_text_element("lastBuildDate", self.last_build_date)
        writer.optional_text_element("generator", self.generator)
        writer.optional_text_element("docs", self.docs)
        if self.cloud is not None:
            self.cloud.to_xml(writer)
        writer.optional_text_element("ttl", self.ttl)
        if self.image is not None:
            self.image.to_xml(writer)
        writer.optional_text_element("rating", self.rating)
        if self.text_input is not None:
            self.text_input.to_xml(writer)
        if self.skip_hours:
            writer.start("skipHours")
            writer.text_elements("hour", self.skip_hours)
            writer.end("skipHours")
        if self.skip_days:
            writer.start("skipDays")
            writer.text_elements("day", self.skip_days)
            writer.end("skipDays")
        for category in self.categories:
            category.to_xml(writer)
        if self.itunes_ext is not None:
            self.itunes_ext.to_xml(writer)
        if self.dublin_core_ext is not None:
            self.dublin_core_ext.to_xml(writer)
        if self.syndication_ext is not None:
            self.syndication_ext.to_xml(writer)
        if self.atom_ext is not None:
            self.atom_ext.to_xml(writer)
        _write_extensions(writer, self.extensions)
        writer.end("channel")
