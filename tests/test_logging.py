"""Tests for log sanitization."""
from skinhub.logging import get_logger, sanitize_for_logging


class TestSanitizeForLogging:
    def test_empty_values(self):
        assert sanitize_for_logging(None) == "N/A"
        assert sanitize_for_logging("") == "N/A"

    def test_control_characters_escaped(self):
        assert sanitize_for_logging("sess\nFAKE ENTRY\r") == "sess\\nFAKE ENTRY\\r"

    def test_long_values_clipped(self):
        assert sanitize_for_logging("x" * 100, max_length=10) == "x" * 10 + "..."

    def test_non_string_values(self):
        assert sanitize_for_logging(5) == "5"


def test_get_logger_is_cached():
    assert get_logger("skinhub.test") is get_logger("skinhub.test")
