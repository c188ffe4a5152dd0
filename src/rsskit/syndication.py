"""RSS 1.0 Syndication module (``sy:*``): how often a channel updates."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from .extension import ExtensionNode, first_extension_value
from .namespaces import SYNDICATION_NAMESPACE

if TYPE_CHECKING:
    from .writer import XmlEventWriter

logger = logging.getLogger(__name__)

NAMESPACE = SYNDICATION_NAMESPACE

DEFAULT_UPDATE_BASE = "1970-01-01T00:00+00:00"


class UpdatePeriod(str, enum.Enum):
    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


@dataclass
class SyndicationExtension:
    period: UpdatePeriod = UpdatePeriod.DAILY
    frequency: int = 1
    base: str = DEFAULT_UPDATE_BASE

    @classmethod
    def from_map(cls, entries: dict[str, list[ExtensionNode]]) -> SyndicationExtension:
        """Build from ``sy:*`` elements; bad values keep the defaults."""
        ext = cls()

        period = first_extension_value(entries, "updatePeriod")
        if period is not None:
            try:
                ext.period = UpdatePeriod(period)
            except ValueError:
                logger.debug("Ignoring unknown sy:updatePeriod %r", period)

        frequency = first_extension_value(entries, "updateFrequency")
        if frequency is not None:
            try:
                value = int(frequency)
            except ValueError:
                value = -1
            if value >= 0:
                ext.frequency = value
            else:
                logger.debug("Ignoring invalid sy:updateFrequency %r", frequency)

        base = first_extension_value(entries, "updateBase")
        if base is not None:
            ext.base = base

        for key in ("updatePeriod", "updateFrequency", "updateBase"):
            entries.pop(key, None)
        return ext

    def is_empty(self) -> bool:
        # All three fields are always written, defaults included.
        return False

    def to_xml(self, writer: XmlEventWriter) -> None:
        writer.text_element("sy:updatePeriod", self.period.value)
        writer.text_element("sy:updateFrequency", str(self.frequency))
        writer.text_element("sy:updateBase", self.base)
