# tests/conftest.py
"""Shared test fixtures and helpers.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/
"""

import os
from collections.abc import Callable
from datetime import UTC, datetime

import pytest
from hypothesis import Phase, Verbosity, settings
from opentelemetry.trace import SpanContext, TraceFlags

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)
settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)
settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    deadline=None,
)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


FIXED_NOW = datetime(2024, 1, 15, 10, 30, 0, tzinfo=UTC)
T0 = datetime(2024, 1, 15, 9, 0, 0, tzinfo=UTC)
T1 = datetime(2024, 1, 15, 9, 5, 0, tzinfo=UTC)


def fixed_clock() -> datetime:
    return FIXED_NOW


def make_span_context(trace_id: int = 0x1234, span_id: int = 0x5678, *, remote: bool = False) -> SpanContext:
    return SpanContext(
        trace_id=trace_id,
        span_id=span_id,
        is_remote=remote,
        trace_flags=TraceFlags(TraceFlags.SAMPLED),
    )


@pytest.fixture
def clock() -> Callable[[], datetime]:
    """Clock that always returns FIXED_NOW."""
    return fixed_clock
