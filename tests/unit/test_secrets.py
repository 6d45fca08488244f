"""Tests for Secret data helpers."""

from __future__ import annotations

import base64

from cdbootstrap_operator.utils.secrets import (
    decode_secret_value,
    encode_secret_value,
    read_secret_key,
    secret_value_is_set,
)


class TestDecodeSecretValue:
    """Test cases for decode_secret_value."""

    def test_decode(self):
        """Test decoding a base64 value."""
        assert decode_secret_value(base64.b64encode(b"hello").decode()) == "hello"

    def test_decode_bytes(self):
        """Test decoding a bytes value."""
        assert decode_secret_value(base64.b64encode(b"hello")) == "hello"

    def test_none(self):
        """Test that a missing value decodes to empty."""
        assert decode_secret_value(None) == ""

    def test_invalid_base64(self):
        """Test that invalid base64 decodes to empty."""
        assert decode_secret_value("not base64!!") == ""

    def test_invalid_utf8(self):
        """Test that non UTF-8 content decodes to empty."""
        assert decode_secret_value(base64.b64encode(b"\xff\xfe").decode()) == ""


class TestEncodeSecretValue:
    """Test cases for encode_secret_value."""

    def test_encode(self):
        """Test encoding a value for a Secret."""
        assert encode_secret_value("hello") == "aGVsbG8="


class TestReadSecretKey:
    """Test cases for read_secret_key and secret_value_is_set."""

    def test_read(self):
        """Test reading a key."""
        secret = {"data": {"SPN_SECRET": encode_secret_value("s3cret")}}

        assert read_secret_key(secret, "SPN_SECRET") == "s3cret"
        assert secret_value_is_set(secret, "SPN_SECRET")

    def test_missing_key(self):
        """Test that a missing key is unset."""
        secret = {"data": {"SPN_SECRET": encode_secret_value("s3cret")}}

        assert read_secret_key(secret, "AZP_TOKEN") == ""
        assert not secret_value_is_set(secret, "AZP_TOKEN")

    def test_empty_value(self):
        """Test that an empty value counts as unset."""
        assert not secret_value_is_set({"data": {"AZP_TOKEN": ""}}, "AZP_TOKEN")

    def test_secret_without_data(self):
        """Test that a Secret without data holds nothing."""
        assert not secret_value_is_set({"metadata": {"name": "demo"}}, "AZP_TOKEN")
        assert not secret_value_is_set({"data": None}, "AZP_TOKEN")
        assert not secret_value_is_set(None, "AZP_TOKEN")
