from __future__ import annotations

from signalk_openmeteo._redact import redact_for_log, redact_url


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "latitude": "43.3",
        "apikey": "secret-key",
        "mqtt": {"password": "pw", "host": "localhost"},
        "Authorization": "Bearer abc",
    }

    redacted = redact_for_log(payload)
    assert redacted["apikey"] == "<redacted>"
    assert redacted["mqtt"]["password"] == "<redacted>"
    assert redacted["mqtt"]["host"] == "localhost"
    assert redacted["Authorization"] == "<redacted>"
    assert redacted["latitude"] == "43.3"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_url_hides_api_key() -> None:
    url = "https://customer-api.open-meteo.com/v1/forecast?latitude=1.0&apikey=abc123&hourly=a,b"

    redacted = redact_url(url)

    assert "abc123" not in redacted
    assert "apikey=<redacted>" in redacted
    assert "hourly=a,b" in redacted


def test_redact_url_without_query() -> None:
    assert redact_url("https://api.open-meteo.com/v1/forecast") == "https://api.open-meteo.com/v1/forecast"
