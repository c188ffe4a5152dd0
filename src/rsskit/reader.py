"""Pull-style XML events on top of lxml's incremental parser.

The rest of the package never touches lxml elements directly: it consumes the
``Start`` / ``Text`` / ``End`` events produced here, one forward pass, in
document order.
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING, Iterator, NamedTuple, Optional, Union

from lxml import etree

if TYPE_CHECKING:
    from lxml.etree import _Element

_XML_NS = "http://www.w3.org/XML/1998/namespace"

# Errors recovery mode may repair without changing what the document means.
_TOLERATED_ERRORS = frozenset((etree.ErrorTypes.NS_ERR_UNDEFINED_NAMESPACE,))


class Start(NamedTuple):
    name: str
    attrs: dict[str, str]
    nsmap: dict[str, str]


class Text(NamedTuple):
    value: str


class End(NamedTuple):
    name: str


Event = Union[Start, Text, End]


def _split_clark(tag: str) -> tuple[str | None, str]:
    if tag[:1] == "{":
        uri, local = tag[1:].split("}", 1)
        return uri, local
    return None, tag


def _element_name(elem: _Element) -> str:
    # In recovery mode an undeclared prefix survives as part of the tag itself
    # ("itunes:author" with no namespace), which is exactly what we want.
    _, local = _split_clark(elem.tag)
    prefix = elem.prefix
    return f"{prefix}:{local}" if prefix else local


def _element_nsmap(elem: _Element) -> dict[str, str]:
    return {prefix: uri for prefix, uri in elem.nsmap.items() if prefix}


def _element_attrs(elem: _Element, nsmap: dict[str, str]) -> dict[str, str]:
    attrs: dict[str, str] = {}
    if not len(elem.attrib):
        return attrs
    prefixes = {uri: prefix for prefix, uri in nsmap.items()}
    for key, value in elem.attrib.items():
        uri, local = _split_clark(key)
        if uri is None:
            attrs[local] = value
        elif uri == _XML_NS:
            attrs[f"xml:{local}"] = value
        else:
            prefix = prefixes.get(uri)
            attrs[f"{prefix}:{local}" if prefix else local] = value
    return attrs


def _text_runs(elem: _Element) -> Iterator[str]:
    """Yield the element's own text: leading text plus every child's tail."""
    if elem.text:
        yield elem.text
    for child in elem:
        if child.tail:
            yield child.tail


def _repaired_error(error_log, checked: int) -> Optional[etree.XMLSyntaxError]:
    """First error recovery mode papered over, other than an undeclared prefix."""
    for entry in list(error_log)[checked:]:
        if entry.level < etree.ErrorLevels.ERROR or entry.type in _TOLERATED_ERRORS:
            continue
        return etree.XMLSyntaxError(entry.message.strip(), entry.type, entry.line, entry.column)
    return None


class EventReader:
    """Iterate over a document as ``Start``, ``Text`` and ``End`` events.

    Text is only guaranteed complete once lxml reports the closing tag, so an
    element's text runs are emitted right before its ``End``. Runs are trimmed
    and blank runs dropped. ``XMLSyntaxError`` is left to the caller.

    With ``recover=True`` only undeclared namespace prefixes are forgiven; any
    other error lxml repaired is raised as soon as it shows up in the log.
    """

    def __init__(self, data: bytes, *, recover: bool = False):
        self._data = data
        self._recover = recover

    def __iter__(self) -> Iterator[Event]:
        context = etree.iterparse(
            io.BytesIO(self._data),
            events=("start", "end"),
            recover=self._recover,
            resolve_entities=False,
            collect_ids=False,
        )
        checked = 0
        for action, elem in context:
            if self._recover:
                checked = self._check_error_log(context, checked)

            if action == "start":
                nsmap = _element_nsmap(elem)
                yield Start(_element_name(elem), _element_attrs(elem, nsmap), nsmap)
                continue

            for run in _text_runs(elem):
                run = run.strip()
                if run:
                    yield Text(run)
            yield End(_element_name(elem))
            # The tail belongs to the parent and has not been read yet.
            elem.clear(keep_tail=True)

        if self._recover:
            self._check_error_log(context, checked)

    @staticmethod
    def _check_error_log(context, checked: int) -> int:
        error_log = context.error_log
        if len(error_log) == checked:
            return checked
        error = _repaired_error(error_log, checked)
        if error is not None:
            raise error
        return len(error_log)
