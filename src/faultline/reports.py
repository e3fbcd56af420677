# src/faultline/reports.py
"""Concrete, read-only report trees.

``Report`` implements ReportNodeProtocol. Reports are immutable: ``attach``
and ``with_child`` return new reports, so a tree can be shared between
threads while it is being projected.

Example:
    report = (
        Report(OSError("disk full"))
        .attach(datetime.now(tz=UTC))
        .attach(Attribute("path", "/var/data"))
        .with_child(Report("retrying"))
    )
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, TypeVar

from opentelemetry.trace import SpanContext

from faultline.attachments import Backtrace, Location, format_attachment
from faultline.contracts.reports import ReportNodeProtocol

T = TypeVar("T")

# Attachment types left out of the human-readable rendering
_HIDDEN_TYPES: frozenset[type] = frozenset({datetime, SpanContext})


@dataclass(frozen=True, slots=True)
class Attachment:
    """A value plus its formatted text, computed once at construction."""

    value: Any
    text: str

    @classmethod
    def of(cls, value: Any, text: str | None = None) -> Attachment:
        """Wrap ``value``, formatting it unless ``text`` is given."""
        if isinstance(value, Attachment):
            return value
        return cls(value, format_attachment(value) if text is None else text)

    @property
    def type_tag(self) -> type:
        return type(self.value)

    def downcast(self, kind: type[T]) -> T | None:
        if type(self.value) is kind:
            return self.value  # type: ignore[no-any-return]
        return None

    def formatted_text(self) -> str:
        return self.text


@dataclass(frozen=True, slots=True)
class Report:
    """One node of a diagnostic report tree.

    Attributes:
        context: Primary context value (an exception, a message, any object)
        attached: Attachments in insertion order
        nested: Child reports in insertion order
    """

    context: Any
    attached: tuple[Attachment, ...] = field(default=())
    nested: tuple[Report, ...] = field(default=())

    @classmethod
    def new(cls, context: Any, *attachments: Any, children: Iterable[Report] = ()) -> Report:
        return cls(context, tuple(Attachment.of(a) for a in attachments), tuple(children))

    # ReportNodeProtocol

    def context_type_name(self) -> str:
        return type(self.context).__name__

    def formatted_context(self) -> str:
        return str(self.context)

    def attachments(self) -> Sequence[Attachment]:
        return self.attached

    def children(self) -> Sequence[Report]:
        return self.nested

    # Construction

    def attach(self, value: Any, text: str | None = None) -> Report:
        """Return a copy with one more attachment."""
        return Report(self.context, (*self.attached, Attachment.of(value, text)), self.nested)

    def with_child(self, child: Report) -> Report:
        """Return a copy with one more child report."""
        return Report(self.context, self.attached, (*self.nested, child))

    def find(self, kind: type[T]) -> T | None:
        """First attachment value whose type is exactly ``kind``."""
        return find_attachment(self, kind)

    @classmethod
    def from_exception(cls, exc: BaseException, *, collect: bool = True) -> Report:
        """Build a report tree from an exception and its chain.

        Children come from ``__cause__`` (or ``__context__`` unless context
        was suppressed) and from the members of an exception group.
        Exceptions already visited are not revisited, so a self-referencing
        chain still produces a finite tree.
        """
        return _from_exception(exc, collect=collect, seen=set())

    def render(self) -> str:
        """Multi-line rendering of the whole tree.

        Timestamps and trace contexts are hidden; they are metadata, not
        diagnostics.
        """
        return render_report(self)

    def __str__(self) -> str:
        return self.render()


def iter_reports(node: ReportNodeProtocol) -> Iterator[ReportNodeProtocol]:
    """Yield ``node`` and all descendants in pre-order."""
    yield node
    for child in node.children():
        yield from iter_reports(child)


def find_attachment(node: ReportNodeProtocol, kind: type[T]) -> T | None:
    """First attachment value on ``node`` whose type is exactly ``kind``."""
    for attachment in node.attachments():
        value = attachment.downcast(kind)
        if value is not None:
            return value
    return None


def _from_exception(exc: BaseException, *, collect: bool, seen: set[int]) -> Report:
    seen.add(id(exc))
    attachments: list[Any] = []
    if collect:
        # Imported lazily: collectors depend on the telemetry layer
        from faultline.telemetry.collectors import collect_metadata

        attachments.extend(collect_metadata())
    if exc.__traceback__ is not None:
        attachments.append(Backtrace.from_traceback(exc.__traceback__))
        attachments.append(Location.from_traceback(exc.__traceback__))

    linked: list[BaseException] = []
    if isinstance(exc, BaseExceptionGroup):
        linked.extend(exc.exceptions)
    if exc.__cause__ is not None:
        linked.append(exc.__cause__)
    elif exc.__context__ is not None and not exc.__suppress_context__:
        linked.append(exc.__context__)

    children = tuple(_from_exception(e, collect=collect, seen=seen) for e in linked if id(e) not in seen)
    return Report.new(exc, *attachments, children=children)


def render_report(node: ReportNodeProtocol) -> str:
    """Multi-line rendering of ``node`` and its descendants.

    One line per node (``Type: context``), attachments indented under it
    with a ``| `` gutter, children indented one level further. Timestamps
    and trace contexts are left out.
    """
    lines: list[str] = []
    _render_into(node, lines, indent="")
    return "\n".join(lines)


def _render_into(node: ReportNodeProtocol, lines: list[str], indent: str) -> None:
    lines.append(f"{indent}{node.context_type_name()}: {node.formatted_context()}")
    for attachment in node.attachments():
        if attachment.type_tag in _HIDDEN_TYPES:
            continue
        text = attachment.formatted_text().replace("\n", f"\n{indent}  | ")
        lines.append(f"{indent}  | {text}")
    for child in node.children():
        _render_into(child, lines, indent + "  ")
