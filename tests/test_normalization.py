from __future__ import annotations

from signalk_openmeteo.ingestion.normalize import decode_payload, safe_float, safe_str, topic_to_path


def test_safe_float_handles_placeholders() -> None:
    assert safe_float(None) is None
    assert safe_float("") is None
    assert safe_float("abc") is None
    assert safe_float(float("nan")) is None
    assert safe_float(float("inf")) is None
    assert safe_float(True) is None
    assert safe_float("3.5") == 3.5
    assert safe_float(0) == 0.0


def test_safe_str() -> None:
    assert safe_str(None) is None
    assert safe_str("") is None
    assert safe_str(12) == "12"


def test_decode_payload() -> None:
    assert decode_payload(b'{"latitude": 1}') == {"latitude": 1}
    assert decode_payload(b"4.2") == 4.2
    assert decode_payload("not json") == "not json"
    assert decode_payload(b"  ") is None


def test_topic_to_path() -> None:
    assert topic_to_path("vessels/self/navigation/position") == "navigation.position"
    assert topic_to_path("vessels/other/navigation/position") is None
    assert topic_to_path("vessels/self") is None
