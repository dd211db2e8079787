"""Unit tests for ordered source fallback."""

import pytest
from sqlalchemy.exc import OperationalError

from advc_explorer.core.fallback import SourceOutcome, attempt, first_available
from advc_explorer.core.rpc_client import NodeRPCError


def failing(error):
    def producer():
        raise error
    return producer


class TestFirstAvailable:

    def test_first_non_empty_wins(self):
        calls = []

        def second():
            calls.append("second")
            return "value"

        def third():
            calls.append("third")
            return "other"

        result = first_available(("a", lambda: []), ("b", second), ("c", third))

        assert result == "value"
        assert calls == ["second"]

    def test_unavailable_source_skipped(self):
        result = first_available(
            ("db", failing(OperationalError("SELECT", {}, Exception("down")))),
            ("rpc", lambda: {"size": 1}),
        )

        assert result == {"size": 1}

    def test_default_when_all_empty(self):
        assert first_available(("a", lambda: None), ("b", failing(NodeRPCError("x"))), default=[]) == []

    def test_zero_is_a_value(self):
        assert first_available(("a", lambda: 0), default=5) == 0

    def test_other_errors_propagate(self):
        with pytest.raises(KeyError):
            first_available(("a", failing(KeyError("bug"))))


class TestAttempt:

    def test_outcomes(self):
        assert attempt("s", lambda: [1])[0] is SourceOutcome.FOUND
        assert attempt("s", lambda: {})[0] is SourceOutcome.EMPTY
        assert attempt("s", failing(NodeRPCError("x")))[0] is SourceOutcome.UNAVAILABLE
