"""Tests for log event filtering."""

from app.logging_config import _filter_project_text, _filter_sensitive_data


class TestLogFilters:
    """Test suite for structlog processors."""

    def test_sensitive_keys_redacted(self):
        event = {"event": "request", "redis_password": "hunter2", "Authorization": "Bearer x"}
        result = _filter_sensitive_data(None, "info", event)
        assert result["redis_password"] == "[REDACTED]"
        assert result["Authorization"] == "[REDACTED]"
        assert result["event"] == "request"

    def test_project_text_redacted(self):
        event = {"event": "recommendation_generated", "project_idea": "stealth startup", "stack_size": 4}
        result = _filter_project_text(None, "info", event)
        assert result["project_idea"] == "[TEXT_REDACTED]"
        assert result["stack_size"] == 4
