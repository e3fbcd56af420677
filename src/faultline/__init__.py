"""
Faultline: project diagnostic report trees into OpenTelemetry events.

A report is a tree of contexts with typed attachments (timestamps,
backtraces, locations, trace contexts, key/values). Faultline turns such a
tree into ordered ``exception`` events, span links, statuses and log
records according to a configurable event spec.
"""

__version__ = "0.1.0"
