"""Tests for log event redaction."""

from app.logging_config import _filter_pii, _filter_sensitive_data


def test_secret_like_keys_redacted():
    event = _filter_sensitive_data(
        None, "info", {"event": "x", "github_token": "ghp_abc", "Authorization": "Bearer y"}
    )
    assert event["github_token"] == "[REDACTED]"
    assert event["Authorization"] == "[REDACTED]"
    assert event["event"] == "x"


def test_pii_keys_redacted():
    event = _filter_pii(None, "info", {"event": "x", "username": "octocat", "user_id": "u-1"})
    assert event["username"] == "[PII_REDACTED]"
    assert event["user_id"] == "u-1"


def test_repo_owner_login_redacted():
    event = _filter_pii(
        None, "warning", {"event": "repository_sync_failed", "repo": "octocat/hello-world"}
    )
    assert event["repo"] == "[PII_REDACTED]/hello-world"


def test_repo_without_owner_kept():
    event = _filter_pii(None, "info", {"event": "x", "repo": "hello-world", "repo_id": 7})
    assert event["repo"] == "hello-world"
    assert event["repo_id"] == 7


def test_github_login_redacted():
    event = _filter_pii(None, "info", {"event": "x", "login": "octocat"})
    assert event["login"] == "[PII_REDACTED]"
