# src/faultline/projection/spec.py
"""Event spec builder and compilation.

An EventSpec accumulates how one report node becomes one ``exception``
event: a tri-state per field, an ordered list of attachment actions and
a ``children`` setting that tells the projector whether to recurse.

Specs are immutable. Every builder method returns a new spec, so a spec
can be shared freely and used as a base for variations:

    base = EventSpec.defaults().smart_attachments()
    verbose = base.all_attachments().recurse()

Compilation is total: every field has a fallback, so ``compile_event``
never raises on a well-formed report node.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime

from faultline.contracts.events import (
    EXCEPTION,
    EXCEPTION_ESCAPED,
    EXCEPTION_EXTRAS,
    EXCEPTION_MESSAGE,
    EXCEPTION_STACKTRACE,
    EXCEPTION_TYPE,
    AttributeValue,
    FinishedEvent,
)
from faultline.contracts.reports import ReportNodeProtocol
from faultline.projection.digest import (
    All,
    AttachmentAction,
    AttachmentDigest,
    ByType,
    Custom,
    Smart,
    classify,
    select_extras,
)
from faultline.projection.tristate import (
    INFER,
    UNSET,
    Action,
    Explicit,
    TriState,
    TriStateMarker,
    as_action,
    merge,
)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class EventSpec:
    """Configuration for projecting report nodes into events.

    Attributes:
        type_name: ``exception.type`` - inferred from the context type name
        message: ``exception.message`` - explicit text, else the formatted
            context (inference and unset behave the same)
        timestamp: event time - Explicit(None) means "now"
        backtrace: ``exception.stacktrace`` - inferred from the first
            backtrace attachment
        escaped: ``exception.escaped`` - explicit only
        attachment_actions: ordered extras selection
        children: UNSET (no child events), INFERRED (recurse with this
            spec) or Explicit(spec) (immediate children use that spec)
    """

    type_name: TriState[str] = UNSET
    message: TriState[str] = UNSET
    timestamp: TriState[datetime | None] = UNSET
    backtrace: TriState[str] = UNSET
    escaped: TriState[bool] = UNSET
    attachment_actions: tuple[AttachmentAction, ...] = field(default=())
    children: TriState[EventSpec] = UNSET

    # Presets

    @classmethod
    def defaults(cls) -> EventSpec:
        """Infer type, timestamp and backtrace."""
        return cls().infer_type().infer_timestamp().infer_backtrace()

    @classmethod
    def standard(cls) -> EventSpec:
        """Defaults plus smart attachment selection."""
        return cls.defaults().smart_attachments()

    @classmethod
    def brief(cls) -> EventSpec:
        """Type, message and timestamp only."""
        return cls().infer_type().infer_timestamp()

    # Field configuration

    def _apply(self, name: str, action: Action) -> EventSpec:
        return replace(self, **{name: merge(getattr(self, name), action)})

    def infer_type(self) -> EventSpec:
        return self._apply("type_name", INFER)

    def set_type(self, type_name: str) -> EventSpec:
        return self._apply("type_name", Explicit(type_name))

    def set_message(self, message: str) -> EventSpec:
        return self._apply("message", Explicit(message))

    def infer_timestamp(self) -> EventSpec:
        return self._apply("timestamp", INFER)

    def set_timestamp(self, timestamp: datetime) -> EventSpec:
        return self._apply("timestamp", Explicit(timestamp))

    def timestamp_now(self) -> EventSpec:
        """Stamp events with the time of compilation."""
        return self._apply("timestamp", Explicit(None))

    def infer_backtrace(self) -> EventSpec:
        return self._apply("backtrace", INFER)

    def set_backtrace(self, backtrace: str) -> EventSpec:
        return self._apply("backtrace", Explicit(backtrace))

    def set_escaped(self, escaped: bool) -> EventSpec:
        return self._apply("escaped", Explicit(escaped))

    # Extras

    def add_attachment_action(self, action: AttachmentAction) -> EventSpec:
        return replace(self, attachment_actions=(*self.attachment_actions, action))

    def smart_attachments(self) -> EventSpec:
        return self.add_attachment_action(Smart())

    def all_attachments(self) -> EventSpec:
        return self.add_attachment_action(All())

    def attachments_of_type(self, tag: type) -> EventSpec:
        return self.add_attachment_action(ByType(tag))

    def add_extra(self, text: str) -> EventSpec:
        return self.add_attachment_action(Custom(text))

    # Recursion

    def recurse(self) -> EventSpec:
        """Project every descendant with this same spec."""
        return self._apply("children", INFER)

    def with_children(self, spec: EventSpec) -> EventSpec:
        """Project the immediate children with ``spec``.

        Deeper descendants follow ``spec.children``.
        """
        return self._apply("children", Explicit(spec))

    # Layering

    def layered(self, other: EventSpec) -> EventSpec:
        """Replay ``other``'s configuration on top of this spec.

        Unset fields in ``other`` leave this spec alone, inferred fields
        mark inference (without downgrading explicit values), explicit
        fields win. ``other``'s attachment actions are appended.
        """
        spec = self
        for name in ("type_name", "message", "timestamp", "backtrace", "escaped", "children"):
            spec = spec._apply(name, as_action(getattr(other, name)))
        return replace(spec, attachment_actions=(*spec.attachment_actions, *other.attachment_actions))

    def child_spec(self) -> EventSpec | None:
        """Spec for this node's children, or None when not recursing."""
        match self.children:
            case TriStateMarker.UNSET:
                return None
            case TriStateMarker.INFERRED:
                return self
            case Explicit(value=spec):
                return spec
        return None

    def compile(
        self,
        node: ReportNodeProtocol,
        digest: AttachmentDigest | None = None,
        *,
        clock: Clock = utc_now,
    ) -> FinishedEvent:
        return compile_event(self, node, digest, clock=clock)


def resolve_timestamp(state: TriState[datetime | None], digest: AttachmentDigest, clock: Clock) -> datetime | None:
    """Resolve the timestamp field.

    Returns None for UNSET: the caller decides what an absent timestamp
    means. For event emission it always means now.
    """
    match state:
        case Explicit(value=None):
            return clock()
        case Explicit(value=value):
            return value
        case TriStateMarker.INFERRED:
            return digest.timestamp if digest.timestamp is not None else clock()
    return None


def compile_event(
    spec: EventSpec,
    node: ReportNodeProtocol,
    digest: AttachmentDigest | None = None,
    *,
    clock: Clock = utc_now,
) -> FinishedEvent:
    """Compile one report node into a finished event.

    Attribute order: type, message, stacktrace, escaped, extras.
    """
    if digest is None:
        digest = classify(node)

    attributes: list[tuple[str, AttributeValue]] = []

    match spec.type_name:
        case Explicit(value=type_name):
            attributes.append((EXCEPTION_TYPE, type_name))
        case TriStateMarker.INFERRED:
            attributes.append((EXCEPTION_TYPE, node.context_type_name()))

    match spec.message:
        case Explicit(value=message):
            attributes.append((EXCEPTION_MESSAGE, message))
        case _:
            attributes.append((EXCEPTION_MESSAGE, node.formatted_context()))

    match spec.backtrace:
        case Explicit(value=backtrace):
            attributes.append((EXCEPTION_STACKTRACE, backtrace))
        case TriStateMarker.INFERRED if digest.backtrace_text is not None:
            attributes.append((EXCEPTION_STACKTRACE, digest.backtrace_text))

    if isinstance(spec.escaped, Explicit):
        attributes.append((EXCEPTION_ESCAPED, spec.escaped.value))

    extras = select_extras(digest, spec.attachment_actions)
    if extras:
        attributes.append((EXCEPTION_EXTRAS, tuple(extras)))

    timestamp = resolve_timestamp(spec.timestamp, digest, clock)
    return FinishedEvent(
        name=EXCEPTION,
        timestamp=timestamp if timestamp is not None else clock(),
        attributes=tuple(attributes),
    )

