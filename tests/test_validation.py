"""Unit tests for the shared argument checks."""

import uuid

import pytest

from parceldesk.domain.errors import ForbiddenError, InvalidArgumentError
from parceldesk.domain.validation import ensure_principal, normalize_email, parse_id


class TestParseId:
    def test_accepts_uuid_string(self):
        raw = uuid.uuid4()
        assert parse_id(str(raw)) == raw

    def test_passes_uuid_through(self):
        raw = uuid.uuid4()
        assert parse_id(raw) is raw

    def test_rejects_malformed(self):
        with pytest.raises(InvalidArgumentError, match="parcel id"):
            parse_id("not-an-id", "parcel id")


class TestEmail:
    def test_normalizes_case_and_whitespace(self):
        assert normalize_email("  A@X.com ") == "a@x.com"

    @pytest.mark.parametrize("raw", [None, "", "   ", "no-at-sign", "a@b"])
    def test_rejects_missing_or_malformed(self, raw):
        with pytest.raises(InvalidArgumentError):
            normalize_email(raw)

    @pytest.mark.parametrize(
        "raw", ["a..b@x.com", "a@x..com", "a@-x.com", ".a@x.com"]
    )
    def test_rejects_addresses_a_loose_pattern_would_accept(self, raw):
        with pytest.raises(InvalidArgumentError, match="not a valid email"):
            normalize_email(raw)


class TestEnsurePrincipal:
    def test_same_owner_passes(self):
        assert ensure_principal("a@x.com", "A@x.com") == "a@x.com"

    def test_other_owner_is_forbidden(self):
        with pytest.raises(ForbiddenError):
            ensure_principal("a@x.com", "b@x.com")
