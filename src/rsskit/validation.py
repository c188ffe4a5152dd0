"""Field-level checks against the RSS 2.0 rules.

Parsing is deliberately lenient; call :func:`validate` when a feed has to be
strictly conformant, e.g. before publishing one.
"""

from __future__ import annotations

import re
from email.utils import parsedate_to_datetime
from typing import Optional
from urllib.parse import urlparse

from dateutil import parser as dateutil_parser

from .errors import ValidationError
from .model import Category, Channel, Cloud, Enclosure, Image, Item, Source, TextInput

_RE_MIME_TYPE = re.compile(r"^[\w.+-]+/[\w.+-]+(\s*;.*)?$")

_CLOUD_PROTOCOLS = frozenset(("xml-rpc", "soap", "http-post"))
_SKIP_DAYS = frozenset(
    ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")
)


def _check_url(value: str, what: str) -> None:
    parsed = urlparse(value)
    if (
        not parsed.scheme
        or any(ch.isspace() for ch in value)
        or (parsed.scheme in ("http", "https") and not parsed.netloc)
    ):
        raise ValidationError(f"{what} is not a valid URL: {value!r}")


def _check_rfc822(value: str, what: str) -> None:
    try:
        parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError) as e:
        raise ValidationError(f"{what} is not an RFC 822 date: {value!r}") from e


def _check_w3c_datetime(value: str, what: str) -> None:
    try:
        dateutil_parser.isoparse(value)
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"{what} is not a W3C datetime: {value!r}") from e


def _parse_int(value: str, what: str) -> int:
    try:
        return int(value)
    except ValueError as e:
        raise ValidationError(f"{what} is not an integer: {value!r}") from e


def _check_range(value: Optional[str], what: str, low: int, high: int) -> None:
    if value is None:
        return
    number = _parse_int(value, what)
    if not low <= number <= high:
        raise ValidationError(f"{what} is not between {low} and {high}")


def _validate_category(category: Category) -> None:
    if category.domain is not None:
        _check_url(category.domain, "Category domain")


def _validate_cloud(cloud: Cloud) -> None:
    if _parse_int(cloud.port, "Cloud port") <= 0:
        raise ValidationError("Cloud port must be greater than 0")
    if not cloud.domain or any(ch.isspace() for ch in cloud.domain):
        raise ValidationError(f"Cloud domain is not a host name: {cloud.domain!r}")
    if cloud.protocol not in _CLOUD_PROTOCOLS:
        raise ValidationError(f"Unknown cloud protocol: {cloud.protocol}")


def _validate_image(image: Image) -> None:
    _check_url(image.url, "Image url")
    _check_url(image.link, "Image link")
    _check_range(image.width, "Image width", 0, 144)
    _check_range(image.height, "Image height", 0, 400)


def _validate_text_input(text_input: TextInput) -> None:
    _check_url(text_input.link, "Text input link")


def _validate_enclosure(enclosure: Enclosure) -> None:
    _check_url(enclosure.url, "Enclosure url")
    if not _RE_MIME_TYPE.match(enclosure.mime_type):
        raise ValidationError(f"Enclosure type is not a MIME type: {enclosure.mime_type!r}")
    if _parse_int(enclosure.length, "Enclosure length") < 0:
        raise ValidationError("Enclosure length must not be negative")


def _validate_source(source: Source) -> None:
    _check_url(source.url, "Source url")


def _validate_item(item: Item) -> None:
    if item.link is not None:
        _check_url(item.link, "Item link")
    if item.comments is not None:
        _check_url(item.comments, "Item comments")
    if item.pub_date is not None:
        _check_rfc822(item.pub_date, "Item pubDate")
    for category in item.categories:
        _validate_category(category)
    if item.enclosure is not None:
        _validate_enclosure(item.enclosure)
    if item.source is not None:
        _validate_source(item.source)
    if item.dublin_core_ext is not None:
        for date in item.dublin_core_ext.dates:
            _check_w3c_datetime(date, "Item dc:date")


def validate(channel: Channel) -> None:
    """Raise ValidationError for the first value that breaks the RSS 2.0 rules."""
    _check_url(channel.link, "Channel link")
    if channel.docs is not None:
        _check_url(channel.docs, "Channel docs")
    if channel.pub_date is not None:
        _check_rfc822(channel.pub_date, "Channel pubDate")
    if channel.last_build_date is not None:
        _check_rfc822(channel.last_build_date, "Channel lastBuildDate")
    if channel.ttl is not None and _parse_int(channel.ttl, "Channel ttl") <= 0:
        raise ValidationError("Channel ttl must be greater than 0")

    for hour in channel.skip_hours:
        _check_range(hour, "Channel skip hour", 0, 23)
    for day in channel.skip_days:
        if day not in _SKIP_DAYS:
            raise ValidationError(f"Unknown skip day: {day}")

    for category in channel.categories:
        _validate_category(category)
    if channel.cloud is not None:
        _validate_cloud(channel.cloud)
    if channel.image is not None:
        _validate_image(channel.image)
    if channel.text_input is not None:
        _validate_text_input(channel.text_input)

    if channel.syndication_ext is not None:
        _check_w3c_datetime(channel.syndication_ext.base, "Channel sy:updateBase")
    if channel.dublin_core_ext is not None:
        for date in channel.dublin_core_ext.dates:
            _check_w3c_datetime(date, "Channel dc:date")

    for item in channel.items:
        _validate_item(item)
