"""Integration tests.

Integration tests may start real processes, make network calls to
local services, or exercise the full application stack. They are
kept in a separate directory so they can be excluded from the fast
unit-test run with ``pytest tests/unit/``.
"""
from __future__ import annotations
