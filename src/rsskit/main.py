from __future__ import annotations

import io
import logging
import re
from typing import IO, Optional, Union

from lxml import etree

from .errors import DecodeError, MalformedXMLError, UnexpectedEOFError
from .model import Channel
from .parser import read_channel
from .reader import EventReader
from .writer import write_channel

logger = logging.getLogger(__name__)

_Source = Union[str, bytes, bytearray, IO[bytes]]

# Pre-compiled regex patterns for the XML declaration
_RE_XML_DECL_ENCODING = re.compile(
    r'(<\?xml[^>]*encoding=["\'])([^"\']+)(["\'][^>]*\?>)', re.IGNORECASE
)
_RE_XML_DECL_ENCODING_BYTES = re.compile(
    rb'(<\?xml[^>]*encoding=["\'])([^"\']+)(["\'][^>]*\?>)', re.IGNORECASE
)

_UTF8_NAMES = frozenset(("utf-8", "utf8"))

# Errors lxml reports when the document stops early.
_EOF_ERROR_CODES = frozenset(
    (
        etree.ErrorTypes.ERR_DOCUMENT_EMPTY,
        etree.ErrorTypes.ERR_TAG_NOT_FINISHED,
        etree.ErrorTypes.ERR_LTSLASH_REQUIRED,
        # libxml2 before 2.12 reports truncated push input this way.
        etree.ErrorTypes.ERR_DOCUMENT_END,
    )
)


def _detect_xml_encoding(content: bytes) -> str:
    """Detect encoding from XML declaration or BOM.

    Returns the detected encoding or 'utf-8' as default.
    """
    # Check for BOM (Byte Order Mark)
    if content.startswith(b"\xff\xfe"):
        return "utf-16"
    elif content.startswith(b"\xfe\xff"):
        return "utf-16"
    elif content.startswith(b"\xef\xbb\xbf"):
        return "utf-8"

    encoding_match = _RE_XML_DECL_ENCODING_BYTES.search(content[:2000])
    if encoding_match:
        return encoding_match.group(2).decode("ascii", errors="replace").lower()

    return "utf-8"


def _ensure_utf8_xml_declaration(content: str) -> str:
    """Ensure the XML declaration's encoding matches the UTF-8 bytes we emit."""
    if not content.lstrip().startswith("<?xml"):
        return content
    return _RE_XML_DECL_ENCODING.sub(r"\1utf-8\3", content, count=1)


def _clean_feed_bytes(content: bytes) -> bytes:
    """Drop leading whitespace so the XML declaration, if any, comes first."""
    if content.startswith(b"\xef\xbb\xbf"):
        return b"\xef\xbb\xbf" + content[3:].lstrip()
    if content.startswith((b"\xff\xfe", b"\xfe\xff")):
        return content
    return content.lstrip()


def _prepare_xml_bytes(source: _Source) -> bytes:
    if hasattr(source, "read"):
        source = source.read()

    if isinstance(source, str):
        # Str input: fix encoding declaration, encode to bytes, then use bytes path.
        source = _ensure_utf8_xml_declaration(source).encode("utf-8")

    cleaned = _clean_feed_bytes(bytes(source))
    if not cleaned.strip():
        raise UnexpectedEOFError("Empty content")

    encoding = _detect_xml_encoding(cleaned)
    if encoding in _UTF8_NAMES:
        try:
            cleaned.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Content is not valid UTF-8: {e}") from e
    return cleaned


def _syntax_error(e: etree.XMLSyntaxError) -> Exception:
    position = getattr(e, "position", None)
    if e.code in _EOF_ERROR_CODES:
        return UnexpectedEOFError(f"Unexpected end of input: {e.msg}", position)
    return MalformedXMLError(f"Failed to parse XML content: {e.msg}", position)


def _read(xml_content: bytes, *, recover: bool, **options) -> Channel:
    return read_channel(iter(EventReader(xml_content, recover=recover)), **options)


def parse(
    source: _Source,
    *,
    include_items: bool = True,
    include_extensions: bool = True,
) -> Channel:
    """Parse an RSS 2.0 document.

    Args:
        source: XML content as bytes or str, or a binary file object
        include_items: Read the channel's items (skipped entirely when False)
        include_extensions: Keep generic and unclaimed extension elements.
            Typed extensions (iTunes, Dublin Core, Syndication, Atom) are
            always read.

    Returns:
        The assembled Channel

    Raises:
        DecodeError: If UTF-8 content contains invalid byte sequences
        MalformedXMLError: If the document is not well-formed XML
        UnexpectedEOFError: If the input ends before a complete channel
        MissingFieldError: If the channel lacks title, link or description
    """
    xml_content = _prepare_xml_bytes(source)
    options = {"include_items": include_items, "include_extensions": include_extensions}

    try:
        return _read(xml_content, recover=False, **options)
    except etree.XMLSyntaxError as e:
        if e.code != etree.ErrorTypes.NS_ERR_UNDEFINED_NAMESPACE:
            raise _syntax_error(e) from e
        logger.debug("Undeclared namespace prefix (%s), retrying in recovery mode", e.msg)

    try:
        return _read(xml_content, recover=True, **options)
    except etree.XMLSyntaxError as e:
        raise _syntax_error(e) from e


def write(channel: Channel, sink: Optional[IO[bytes]] = None) -> Optional[bytes]:
    """Serialize ``channel`` as an RSS 2.0 document encoded in UTF-8.

    Writes into ``sink`` when one is given, otherwise returns the bytes.
    Errors raised by the sink propagate unchanged.
    """
    if sink is not None:
        write_channel(channel, sink)
        return None
    buffer = io.BytesIO()
    write_channel(channel, buffer)
    return buffer.getvalue()
