# src/faultline/projection/tristate.py
"""Tri-state field resolution.

Every configurable event field is in one of three states:

- UNSET: leave the field out of the event
- INFERRED: derive the value from the report's attachments at build time
- Explicit(value): use the literal value

Configuration changes arrive as FieldActions and are folded in with
``merge``. Precedence is Explicit > INFERRED > UNSET: inference never
downgrades an explicit value, and a later explicit value always replaces
an earlier one. Fields are merged independently of each other.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")


class TriStateMarker(StrEnum):
    """The two value-less states of a tri-state field."""

    UNSET = "unset"
    INFERRED = "inferred"


class FieldAction(StrEnum):
    """The two value-less configuration actions."""

    LEAVE = "leave"
    INFER = "infer"


@dataclass(frozen=True, slots=True)
class Explicit(Generic[T]):
    """An explicitly configured field value (also used as an action)."""

    value: T


UNSET = TriStateMarker.UNSET
INFERRED = TriStateMarker.INFERRED
LEAVE = FieldAction.LEAVE
INFER = FieldAction.INFER

TriState: TypeAlias = TriStateMarker | Explicit[T]
Action: TypeAlias = FieldAction | Explicit[T]


def merge(existing: "TriState[T]", incoming: "Action[T]") -> "TriState[T]":
    """Fold one configuration action into a field's current state.

    Args:
        existing: Current state of the field
        incoming: LEAVE (no-op), INFER, or Explicit(value)

    Returns:
        The new state. INFER leaves an Explicit state untouched.
    """
    match incoming:
        case FieldAction.LEAVE:
            return existing
        case FieldAction.INFER:
            if isinstance(existing, Explicit):
                return existing
            return INFERRED
        case Explicit():
            return incoming
    raise TypeError(f"Unknown field action: {incoming!r}")


def as_action(state: "TriState[T]") -> "Action[T]":
    """Translate a state into the action that reproduces it on another spec."""
    match state:
        case TriStateMarker.UNSET:
            return LEAVE
        case TriStateMarker.INFERRED:
            return INFER
        case Explicit():
            return state
    raise TypeError(f"Unknown tri-state value: {state!r}")
