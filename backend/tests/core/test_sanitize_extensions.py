"""Extension Sanitization: tests for deny-set redaction and forced fields.

Tests cover:
    - Each deny-set key is dropped; safe keys survive unchanged
    - Safe-only input == input + code + correlationId
    - Nested `error` keeps only safe keys, and is omitted when nothing safe remains
    - code/correlationId cannot be shadowed by input
    - httpStatus kept only when numeric
    - Input is never mutated; non-mapping input yields the forced fields only
    - A custom SanitizationPolicy changes the deny set
"""

import copy

import pytest

from app.core.sanitize_extensions import (
    DEFAULT_SENSITIVE_KEYS,
    SanitizationPolicy,
    sanitize_extensions,
    strip_sensitive_keys,
)


def _sanitize(raw, code="NOT_FOUND", correlation_id="cid-1", **kwargs):
    return sanitize_extensions(
        raw, display_code=code, correlation_id=correlation_id, **kwargs,
    ).as_dict()


@pytest.mark.parametrize("key", sorted(DEFAULT_SENSITIVE_KEYS))
def test_each_sensitive_key_is_dropped(key):
    out = _sanitize({key: "secret", "safeKey": "safe value"})
    assert key not in out
    assert out["safeKey"] == "safe value"


def test_safe_only_input_equals_input_plus_forced_fields():
    raw = {"details": {"info": "details"}, "field": "email", "retryAfterMs": 10}
    assert _sanitize(raw) == {**raw, "code": "NOT_FOUND", "correlationId": "cid-1"}


def test_nested_error_keeps_only_safe_keys():
    out = _sanitize({
        "error": {"stack": "nested stack", "message": "nested message"},
    })
    assert out["error"] == {"message": "nested message"}


def test_nested_error_with_only_sensitive_keys_is_omitted():
    out = _sanitize({"error": {"stack": "s", "internal": "i"}})
    assert "error" not in out


def test_nested_error_with_only_safe_keys_is_preserved():
    out = _sanitize({"error": {"message": "Safe message", "code": "SAFE_CODE"}})
    assert out["error"] == {"message": "Safe message", "code": "SAFE_CODE"}


def test_nested_error_is_filtered_at_depth():
    out = _sanitize({"error": {"cause": {"debug": "x", "reason": "timeout"}}})
    assert out["error"] == {"cause": {"reason": "timeout"}}


def test_non_mapping_nested_error_is_copied():
    assert _sanitize({"error": "boom"})["error"] == "boom"


def test_forced_fields_cannot_be_shadowed():
    out = _sanitize({"code": "spoofed", "correlationId": "spoofed"}, code="UNAUTHORIZED")
    assert out["code"] == "UNAUTHORIZED"
    assert out["correlationId"] == "cid-1"


@pytest.mark.parametrize("value, expected", [
    (418, 418), (503.0, 503), ("418", None), (True, None), (None, None),
])
def test_http_status_kept_only_when_numeric(value, expected):
    out = _sanitize({"httpStatus": value})
    assert out.get("httpStatus") == expected


def test_input_is_not_mutated():
    raw = {"stack": "trace", "error": {"stack": "s", "message": "m"}, "keep": 1}
    before = copy.deepcopy(raw)
    _sanitize(raw)
    assert raw == before


@pytest.mark.parametrize("raw", [None, "not a mapping", ["code"], 42])
def test_non_mapping_extensions_yield_forced_fields(raw):
    assert _sanitize(raw) == {"code": "NOT_FOUND", "correlationId": "cid-1"}


def test_custom_policy_changes_deny_set():
    policy = SanitizationPolicy(sensitive_keys=frozenset({"tenantSecret"}))
    out = _sanitize({"tenantSecret": "x", "stack": "kept"}, policy=policy)
    assert "tenantSecret" not in out
    assert out["stack"] == "kept"


def test_strip_sensitive_keys_returns_new_dict():
    data = {"message": "m"}
    stripped = strip_sensitive_keys(data, DEFAULT_SENSITIVE_KEYS)
    assert stripped == data
    assert stripped is not data
