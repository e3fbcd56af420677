# src/faultline/projection/__init__.py
"""Report-to-event projection engine.

Components, leaf first:
- tristate: UNSET / INFERRED / Explicit field states and their merge rule
- digest: attachment classification and extras selection actions
- spec: EventSpec builder and single-node compilation
- projector: pre-order projection of a whole report tree
"""

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
from faultline.projection.projector import project
from faultline.projection.spec import EventSpec, compile_event, resolve_timestamp, utc_now
from faultline.projection.tristate import (
    INFER,
    INFERRED,
    LEAVE,
    UNSET,
    Explicit,
    FieldAction,
    TriStateMarker,
    merge,
)

__all__ = [
    "INFER",
    "INFERRED",
    "LEAVE",
    "UNSET",
    "All",
    "AttachmentAction",
    "AttachmentDigest",
    "ByType",
    "Custom",
    "EventSpec",
    "Explicit",
    "FieldAction",
    "Smart",
    "TriStateMarker",
    "classify",
    "compile_event",
    "merge",
    "project",
    "resolve_timestamp",
    "select_extras",
    "utc_now",
]
