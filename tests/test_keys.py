"""Tests for public key decoding and horizon URL resolution."""

import base64

import pytest

from hyphen_toggle.endpoints import (
    DEFAULT_HORIZON_URL,
    EndpointResolver,
    default_horizon_url,
)
from hyphen_toggle.exceptions import InvalidKeyFormatError
from hyphen_toggle.keys import (
    ABSENT,
    decode_public_key,
    get_org_id_from_public_key,
    validate_public_key,
)


def encode(text: str) -> str:
    return base64.b64encode(text.encode()).decode()


def make_public_key(org_id: str, secret: str = "some-secret") -> str:
    return "public_" + encode(f"{org_id}:{secret}")


class TestDecodePublicKey:
    """Test organization id extraction."""

    @pytest.mark.parametrize(
        "org_id", ["test-org", "valid_org-123", "123456", "a", "a" * 100]
    )
    def test_valid_org_ids(self, org_id):
        """Valid organization ids are extracted."""
        assert get_org_id_from_public_key(make_public_key(org_id)) == org_id

    def test_key_without_prefix(self):
        """The public_ prefix is optional."""
        assert get_org_id_from_public_key(encode("org-without-prefix:secret")) == "org-without-prefix"

    def test_result_type(self):
        """decode_public_key returns a result with a found flag."""
        result = decode_public_key(make_public_key("acme"))
        assert result.found
        assert result.organization_id == "acme"
        assert decode_public_key("public_!!!") is ABSENT
        assert not ABSENT.found

    def test_multiple_colons(self):
        """Only the text before the first colon is the organization id."""
        key = "public_" + encode("multi-colon-org:secret:extra:data")
        assert get_org_id_from_public_key(key) == "multi-colon-org"

    def test_no_colon(self):
        """Decoded content without a colon is taken whole."""
        key = "public_" + encode("orgidwithoutcolon")
        assert get_org_id_from_public_key(key) == "orgidwithoutcolon"

    def test_binary_secret(self):
        """Only the organization id has to be text; the secret may be any bytes."""
        key = "public_" + base64.b64encode(b"acme:\xff\xfe\x01").decode()
        assert get_org_id_from_public_key(key) == "acme"
        assert default_horizon_url(key) == "https://acme.toggle.hyphen.cloud"

    def test_unpadded_payload(self):
        """Base64 payloads with stripped padding still decode."""
        key = "public_" + encode("ab:c").rstrip("=")
        assert get_org_id_from_public_key(key) == "ab"

    @pytest.mark.parametrize(
        "key",
        [
            "public_invalid-base64!",
            "public_" + encode(""),
            "public_" + encode(":secret-data"),
            "public_" + encode("org@invalid#chars:data"),
            "public_" + encode("org with spaces:data"),
            "public_" + encode("org\n:data"),
            "public_",
            "",
            None,
            12345,
        ],
    )
    def test_invalid_keys_return_none(self, key):
        """Invalid keys never raise and yield None."""
        assert get_org_id_from_public_key(key) is None


class TestValidatePublicKey:
    """Test prefix validation."""

    @pytest.mark.parametrize("key", ["invalid-key", "private_some-key", ""])
    def test_rejects_missing_prefix(self, key):
        """Keys without the public_ prefix are rejected."""
        with pytest.raises(InvalidKeyFormatError) as exc_info:
            validate_public_key(key)
        assert "Public API key must start with 'public_'" in str(exc_info.value)

    def test_accepts_prefixed_and_none(self):
        """Prefixed keys and None are accepted."""
        validate_public_key("public_valid-key-123")
        validate_public_key(None)


class TestDefaultHorizonUrl:
    """Test default horizon URL building."""

    def test_org_url(self):
        """A decodable key yields the organization URL."""
        assert default_horizon_url(make_public_key("test-org")) == "https://test-org.toggle.hyphen.cloud"

    @pytest.mark.parametrize(
        "key",
        [
            "invalid-key",
            "public_invalid-base64!",
            "public_" + encode(":secret"),
            "public_" + encode("org@invalid:data"),
            "",
            None,
        ],
    )
    def test_fallback_url(self, key):
        """Anything undecodable yields the global URL."""
        assert default_horizon_url(key) == DEFAULT_HORIZON_URL
        assert DEFAULT_HORIZON_URL == "https://toggle.hyphen.cloud"


class TestEndpointResolver:
    """Test the candidate URL list."""

    def test_empty_by_default(self):
        """No URLs without a key."""
        assert EndpointResolver().urls == []
        assert EndpointResolver.for_public_key(None).urls == []

    def test_seeded_from_key(self):
        """A key seeds the list with its default URL."""
        resolver = EndpointResolver.for_public_key(make_public_key("acme"))
        assert resolver.urls == ["https://acme.toggle.hyphen.cloud"]

    def test_replace_urls(self):
        """Assigning urls replaces the whole list, empty included."""
        resolver = EndpointResolver(["https://a.example"])
        resolver.urls = ["https://b.example", "https://c.example"]
        assert resolver.urls == ["https://b.example", "https://c.example"]
        resolver.urls = []
        assert resolver.urls == []
