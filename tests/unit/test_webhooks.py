"""Unit tests for webhook signature verification."""

import json

import pytest

from payment_proxy.models.exceptions import ValidationError
from payment_proxy.services.webhooks import (
    WebhookSignatureError,
    WebhookVerifier,
    compute_signature,
)

SECRET = "whsec_test"
NOW = 1_700_000_000.0
BODY = json.dumps({"id": "evt_1", "name": "payment_intent.succeeded"}).encode()


@pytest.fixture
def verifier():
    return WebhookVerifier(secret=SECRET, tolerance_seconds=300)


def test_compute_signature_is_hex_sha256():
    signature = compute_signature(SECRET, "1700000000", b"{}")

    assert len(signature) == 64
    assert signature == compute_signature(SECRET, "1700000000", b"{}")
    assert signature != compute_signature("other", "1700000000", b"{}")


def test_valid_signature_passes(verifier):
    timestamp = str(int(NOW))
    verifier.verify(BODY, timestamp, compute_signature(SECRET, timestamp, BODY), now=NOW)


def test_millisecond_timestamps_are_accepted(verifier):
    timestamp = str(int(NOW * 1000))
    verifier.verify(BODY, timestamp, compute_signature(SECRET, timestamp, BODY), now=NOW)


def test_uppercase_signature_is_accepted(verifier):
    timestamp = str(int(NOW))
    signature = compute_signature(SECRET, timestamp, BODY).upper()

    verifier.verify(BODY, timestamp, signature, now=NOW)


@pytest.mark.parametrize(
    "timestamp, signature",
    [
        (None, "abc"),
        ("1700000000", None),
        ("1700000000", "0" * 64),
        ("not-a-number", "abc"),
        ("nan", "abc"),
    ],
)
def test_bad_headers_are_rejected(verifier, timestamp, signature):
    with pytest.raises(WebhookSignatureError) as exc_info:
        verifier.verify(BODY, timestamp, signature, now=NOW)

    assert exc_info.value.status_code == 401


def test_tampered_body_is_rejected(verifier):
    timestamp = str(int(NOW))
    signature = compute_signature(SECRET, timestamp, BODY)

    with pytest.raises(WebhookSignatureError):
        verifier.verify(BODY + b" ", timestamp, signature, now=NOW)


def test_stale_timestamp_is_rejected(verifier):
    timestamp = str(int(NOW - 301))
    signature = compute_signature(SECRET, timestamp, BODY)

    with pytest.raises(WebhookSignatureError):
        verifier.verify(BODY, timestamp, signature, now=NOW)


def test_zero_tolerance_skips_timestamp_check():
    verifier = WebhookVerifier(secret=SECRET, tolerance_seconds=0)
    timestamp = "1"

    verifier.verify(BODY, timestamp, compute_signature(SECRET, timestamp, BODY), now=NOW)


def test_without_secret_everything_is_accepted():
    verifier = WebhookVerifier(secret=None)

    assert verifier.enabled is False
    verifier.verify(BODY, None, None)


class TestParseEvent:
    def test_returns_envelope(self, verifier):
        assert verifier.parse_event(BODY)["name"] == "payment_intent.succeeded"

    @pytest.mark.parametrize("body", [b"", b"not json", b"[1, 2]", b'"text"'])
    def test_rejects_non_object_payloads(self, verifier, body):
        with pytest.raises(ValidationError, match="Invalid webhook payload"):
            verifier.parse_event(body)
