# Tests for the secret codec
# Covers: encode/decode round-trip, randomness, wrong password,
#         format validation, the fixed regression vector

import pytest

from passbook import crypto
from passbook.crypto import SecretCodec
from passbook.exceptions import AuthenticationError, CodecError, FormatError


KNOWN_VECTOR = (
    "82818c21062c68b2c97d56de73d9661c"
    ":94dbb90b35f6a2f2866f3a41e72080e2"
    ":d67c1498bd07be24b68eaf15589d9525"
)


class TestRoundTrip:
    def test_encode_decode(self, codec):
        message = "Hello World! This is a secret message."
        encoded = codec.encode(message, "super_secure_password")
        assert codec.decode(encoded, "super_secure_password") == message

    def test_wrong_password_fails(self, codec):
        encoded = codec.encode("Hello World! This is a secret message.", "super_secure_password")
        with pytest.raises(AuthenticationError):
            codec.decode(encoded, "wrong_password")

    @pytest.mark.parametrize("message", ["", "a", "x" * 16, "x" * 33, "pässwörd ✓ 密码"])
    def test_lengths_and_unicode(self, codec, message):
        assert codec.decode(codec.encode(message, "pw"), "pw") == message

    def test_bytes_plaintext(self, codec):
        encoded = codec.encode("grüße".encode("utf-8"), "pw")
        assert codec.decode(encoded, "pw") == "grüße"

    def test_module_level_helpers(self):
        encoded = crypto.encode("Secret", "password123")
        assert crypto.decode(encoded, "password123") == "Secret"


class TestEncodedFormat:
    def test_three_colon_separated_hex_fields(self, codec):
        encoded = codec.encode("abcdefg", "123456")
        salt, iv, ciphertext = encoded.split(":")
        assert len(bytes.fromhex(salt)) == 16
        assert len(bytes.fromhex(iv)) == 16
        assert len(bytes.fromhex(ciphertext)) == 16
        assert "_" not in encoded

    def test_padding_adds_full_block_on_boundary(self, codec):
        encoded = codec.encode("x" * 16, "pw")
        assert len(bytes.fromhex(encoded.split(":")[2])) == 32

    def test_encodings_are_never_identical(self, codec):
        first = codec.encode("same", "same")
        second = codec.encode("same", "same")
        assert first != second
        assert first.split(":")[0] != second.split(":")[0]
        assert first.split(":")[1] != second.split(":")[1]
        assert codec.decode(first, "same") == codec.decode(second, "same") == "same"


class TestKnownVector:
    def test_decodes_regression_vector(self, codec):
        assert codec.decode(KNOWN_VECTOR, "123456") == "abcdefg"

    def test_regression_vector_wrong_password(self, codec):
        with pytest.raises(AuthenticationError):
            codec.decode(KNOWN_VECTOR, "1234567")


class TestFormatErrors:
    @pytest.mark.parametrize("encoded", [
        "notthreefields",
        "aa:bb",
        "aa:bb:cc:dd",
        "",
    ])
    def test_wrong_field_count(self, codec, encoded):
        with pytest.raises(FormatError):
            codec.decode(encoded, "pw")

    def test_short_salt_and_iv(self, codec):
        with pytest.raises(FormatError):
            codec.decode("00:00:00", "pw")

    def test_underscore_delimiter_rejected(self, codec):
        with pytest.raises(FormatError):
            codec.decode(KNOWN_VECTOR.replace(":", "_"), "123456")

    def test_bad_hex(self, codec):
        salt, iv, ct = KNOWN_VECTOR.split(":")
        with pytest.raises(FormatError):
            codec.decode(f"zz{salt[2:]}:{iv}:{ct}", "123456")
        with pytest.raises(FormatError):
            codec.decode(f"{salt}:{iv}:{ct}0", "123456")

    def test_wrong_iv_length(self, codec):
        salt, iv, ct = KNOWN_VECTOR.split(":")
        with pytest.raises(FormatError):
            codec.decode(f"{salt}:{iv}00:{ct}", "123456")

    @pytest.mark.parametrize("ct", ["", "00" * 15, "00" * 17])
    def test_ciphertext_not_block_multiple(self, codec, ct):
        salt, iv, _ = KNOWN_VECTOR.split(":")
        with pytest.raises(FormatError):
            codec.decode(f"{salt}:{iv}:{ct}", "123456")

    def test_format_error_is_value_error(self):
        assert issubclass(FormatError, ValueError)


class TestTampering:
    def test_flipped_last_block_fails(self, codec):
        encoded = codec.encode("Secret", "pw")
        salt, iv, ct = encoded.split(":")
        raw = bytearray(bytes.fromhex(ct))
        raw[-1] ^= 0xFF
        with pytest.raises(AuthenticationError):
            codec.decode(f"{salt}:{iv}:{raw.hex()}", "pw")

    def test_generic_public_message(self):
        assert FormatError.public_message == AuthenticationError.public_message
        assert issubclass(AuthenticationError, CodecError)


class TestKeyDerivation:
    def test_scrypt_parameters(self):
        assert (SecretCodec.SCRYPT_N, SecretCodec.SCRYPT_R, SecretCodec.SCRYPT_P) == (16384, 8, 1)

    def test_derive_key_is_deterministic_per_salt(self, codec):
        salt = b"\x01" * 16
        key = codec.derive_key("pw", salt)
        assert len(key) == 32
        assert key == codec.derive_key("pw", salt)
        assert key != codec.derive_key("pw", b"\x02" * 16)
