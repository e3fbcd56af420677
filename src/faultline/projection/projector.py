# src/faultline/projection/projector.py
"""Recursive projection of report trees into event lists.

The projector is a pure, synchronous pre-order walk: the parent's event
comes first, then each child's subtree fully expanded before the next
sibling. Event order is part of the contract.

Precondition: the report tree is acyclic and is not mutated during the
walk. No cycle detection is performed. Callers projecting untrusted or
unbounded trees must cap depth and fan-out before calling ``project``.
"""

from faultline.contracts.events import FinishedEvent
from faultline.contracts.reports import ReportNodeProtocol
from faultline.projection.digest import classify
from faultline.projection.spec import Clock, EventSpec, compile_event, utc_now


def project(
    node: ReportNodeProtocol,
    spec: EventSpec,
    *,
    clock: Clock = utc_now,
) -> list[FinishedEvent]:
    """Project ``node`` (and, depending on ``spec.children``, its descendants).

    Args:
        node: Root report node
        spec: Spec for ``node``. ``spec.children`` decides recursion:
            UNSET stops here, INFERRED reuses ``spec``, Explicit(child)
            hands ``child`` to the immediate children.
        clock: Source of "now" for events without a resolved timestamp

    Returns:
        Events in pre-order.
    """
    events: list[FinishedEvent] = []
    _project_into(node, spec, clock, events)
    return events


def _project_into(
    node: ReportNodeProtocol,
    spec: EventSpec,
    clock: Clock,
    events: list[FinishedEvent],
) -> None:
    events.append(compile_event(spec, node, classify(node), clock=clock))

    child_spec = spec.child_spec()
    if child_spec is None:
        return
    for child in node.children():
        _project_into(child, child_spec, clock, events)
