"""Test helpers for code that records reports.

RecordingSink captures everything written to it so tests can assert on
events, statuses, links and span lifetime without an OpenTelemetry SDK.
"""

from faultline.testing.sinks import RecordedLink, RecordedStatus, RecordingSink

__all__ = ["RecordedLink", "RecordedStatus", "RecordingSink"]
