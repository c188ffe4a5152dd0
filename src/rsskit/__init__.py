from .atom import AtomExtension, AtomLink
from .dublincore import DublinCoreExtension
from .errors import (
    DecodeError,
    MalformedXMLError,
    MissingFieldError,
    ParseError,
    UnexpectedEOFError,
    ValidationError,
)
from .extension import ExtensionMap, ExtensionNode
from .itunes import ITunesCategory, ITunesChannelExtension, ITunesItemExtension, ITunesOwner
from .main import parse, write
from .model import Category, Channel, Cloud, Enclosure, Guid, Image, Item, Source, TextInput
from .syndication import SyndicationExtension, UpdatePeriod
from .validation import validate

__all__ = [
    "AtomExtension",
    "AtomLink",
    "Category",
    "Channel",
    "Cloud",
    "DecodeError",
    "DublinCoreExtension",
    "Enclosure",
    "ExtensionMap",
    "ExtensionNode",
    "Guid",
    "ITunesCategory",
    "ITunesChannelExtension",
    "ITunesItemExtension",
    "ITunesOwner",
    "Image",
    "Item",
    "MalformedXMLError",
    "MissingFieldError",
    "ParseError",
    "Source",
    "SyndicationExtension",
    "TextInput",
    "UnexpectedEOFError",
    "UpdatePeriod",
    "ValidationError",
    "parse",
    "validate",
    "write",
]
