"""Tests for the normalized error record and its wire form."""

import json

from crashreport.models.error import NormalizedError
from crashreport.models.trace import Frame, Trace


def make_error() -> NormalizedError:
    return NormalizedError(
        message="wrapped err: new error",
        inner_error="new error",
        class_name="db",
        data={"table": "users", "attempts": 3},
        stack_trace=Trace(
            [
                Frame(line_number=12, package_name="app.db", file_name="db.py", method_name="query"),
                Frame(line_number=-1, file_name="main.py"),
            ]
        ),
    )


class TestNormalizedError:
    """Test NormalizedError model."""

    def test_defaults(self) -> None:
        """Test that every field but the message defaults to empty."""
        error = NormalizedError(message="boom")

        assert error.inner_error == ""
        assert error.class_name == ""
        assert error.data is None
        assert len(error.stack_trace) == 0

    def test_str_is_message(self) -> None:
        """Test that the text of the record is its message."""
        assert str(NormalizedError(message="boom")) == "boom"

    def test_wire_keys(self) -> None:
        """Test the exact keys used on the wire."""
        wire = make_error().to_wire()

        assert wire == {
            "message": "wrapped err: new error",
            "innerError": "new error",
            "className": "db",
            "data": {"table": "users", "attempts": 3},
            "stackTrace": [
                {
                    "lineNumber": 12,
                    "className": "app.db",
                    "fileName": "db.py",
                    "methodName": "query",
                },
                {"lineNumber": -1, "fileName": "main.py"},
            ],
        }

    def test_empty_fields_are_omitted(self) -> None:
        """Test that empty fields do not appear on the wire."""
        assert NormalizedError(message="boom").to_wire() == {"message": "boom"}

    def test_json_round_trip(self) -> None:
        """Test that serializing and parsing preserves all non-empty fields."""
        error = make_error()

        restored = NormalizedError.model_validate_json(error.to_json())

        assert restored == error
        assert restored.stack_trace[0].package_name == "app.db"

    def test_to_json_is_valid_json(self) -> None:
        """Test that to_json produces parseable JSON."""
        parsed = json.loads(make_error().to_json(indent=2))
        assert parsed["stackTrace"][1]["lineNumber"] == -1
