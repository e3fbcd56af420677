# src/faultline/projection/digest.py
"""Attachment classification and extras selection.

``classify`` walks a report node's attachments once, in insertion order,
and pulls the first timestamp, backtrace and location out of band while
recording every attachment's (type tag, text) pair in ``all``.

Attachment actions then turn ``all`` into the flat list of extra strings
carried by the ``exception.extras`` attribute. Actions run in the order
they were added and their outputs are concatenated without
de-duplication across actions.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime

from faultline.attachments import Backtrace, Location
from faultline.contracts.reports import ReportNodeProtocol

# Types surfaced through dedicated event fields
RESERVED_TYPES: tuple[type, ...] = (datetime, Backtrace, Location)


@dataclass(frozen=True, slots=True)
class AttachmentDigest:
    """Per-node summary of attachments, built fresh for each projection.

    Attributes:
        timestamp: First timestamp attachment, if any
        backtrace_text: Formatted text of the first backtrace attachment
        location_text: Formatted text of the first location attachment
        all: (type tag, formatted text) for every attachment, in order
    """

    timestamp: datetime | None = None
    backtrace_text: str | None = None
    location_text: str | None = None
    all: tuple[tuple[type, str], ...] = ()


def classify(node: ReportNodeProtocol) -> AttachmentDigest:
    """Build the attachment digest for one report node."""
    timestamp: datetime | None = None
    backtrace_text: str | None = None
    location_text: str | None = None
    entries: list[tuple[type, str]] = []

    for attachment in node.attachments():
        tag = attachment.type_tag
        text = attachment.formatted_text()
        if tag is datetime and timestamp is None:
            timestamp = attachment.downcast(datetime)
        elif tag is Backtrace and backtrace_text is None:
            backtrace_text = text
        elif tag is Location and location_text is None:
            location_text = text
        entries.append((tag, text))

    return AttachmentDigest(
        timestamp=timestamp,
        backtrace_text=backtrace_text,
        location_text=location_text,
        all=tuple(entries),
    )


class AttachmentAction(ABC):
    """One step of extras selection."""

    __slots__ = ()

    @abstractmethod
    def select(self, digest: AttachmentDigest) -> list[str]:
        """Return the extra strings this action contributes."""


@dataclass(frozen=True, slots=True)
class Smart(AttachmentAction):
    """Everything except the first occurrence of each reserved type.

    The first timestamp, backtrace and location are already surfaced by
    dedicated fields. Later occurrences of those types are kept.
    """

    def select(self, digest: AttachmentDigest) -> list[str]:
        seen: set[type] = set()
        selected: list[str] = []
        for tag, text in digest.all:
            if tag in RESERVED_TYPES and tag not in seen:
                seen.add(tag)
                continue
            selected.append(text)
        return selected


@dataclass(frozen=True, slots=True)
class All(AttachmentAction):
    """Every attachment, unfiltered."""

    def select(self, digest: AttachmentDigest) -> list[str]:
        return [text for _, text in digest.all]


@dataclass(frozen=True, slots=True)
class ByType(AttachmentAction):
    """Only attachments whose type tag is exactly ``tag``."""

    tag: type

    def select(self, digest: AttachmentDigest) -> list[str]:
        return [text for tag, text in digest.all if tag is self.tag]


@dataclass(frozen=True, slots=True)
class Custom(AttachmentAction):
    """A literal extra string, independent of the attachments."""

    text: str

    def select(self, digest: AttachmentDigest) -> list[str]:
        return [self.text]


def select_extras(digest: AttachmentDigest, actions: tuple[AttachmentAction, ...]) -> list[str]:
    """Apply ``actions`` in order and concatenate their outputs."""
    extras: list[str] = []
    for action in actions:
        extras.extend(action.select(digest))
    return extras
