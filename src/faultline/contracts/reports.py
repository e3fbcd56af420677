# src/faultline/contracts/reports.py
"""Report capability protocols.

The projection core never touches a concrete report storage structure.
It consumes report nodes and attachments only through these protocols,
so any tree that can answer these questions can be projected.

Precondition: children form a tree. The projector performs no cycle
detection; a cyclic structure is a caller contract violation.
"""

from collections.abc import Sequence
from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class AttachmentProtocol(Protocol):
    """A type-tagged side value recorded on a report node.

    Attachments are never mutated by the core. ``formatted_text`` is
    infallible by contract; formatting failures belong to whoever built
    the attachment.
    """

    @property
    def type_tag(self) -> type:
        """Exact type of the attached value."""
        ...

    def downcast(self, kind: type[T]) -> T | None:
        """Return the attached value if its type tag is exactly ``kind``."""
        ...

    def formatted_text(self) -> str:
        """Cached human-readable rendering of the value."""
        ...


@runtime_checkable
class ReportNodeProtocol(Protocol):
    """One node of a diagnostic report tree."""

    def context_type_name(self) -> str:
        """Runtime type name of the primary context value."""
        ...

    def formatted_context(self) -> str:
        """Human-readable rendering of the primary context value."""
        ...

    def attachments(self) -> Sequence[AttachmentProtocol]:
        """Attachments in insertion order."""
        ...

    def children(self) -> Sequence["ReportNodeProtocol"]:
        """Child reports in insertion order."""
        ...
