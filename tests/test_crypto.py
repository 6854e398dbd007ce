import hashlib
import os
import unittest
from unittest.mock import patch

from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from familyvault.core.crypto import (
    AuthenticationFailed,
    Container,
    ContainerCodec,
    DecryptionError,
    EntropyUnavailable,
    InvalidArgument,
    MalformedContainer,
    decode,
    derive_key,
    encode,
)
from familyvault.security.constants import CONTAINER_HEADER_SIZE, KDF_ITERATIONS


class KeyDerivationTests(unittest.TestCase):
    """PBKDF2 parameters, determinism and argument checks."""

    def setUp(self) -> None:
        self.salt = bytes(range(16))

    def test_matches_reference_pbkdf2_sha256(self) -> None:
        expected = hashlib.pbkdf2_hmac("sha256", b"test123", self.salt, KDF_ITERATIONS, 32)
        self.assertEqual(derive_key(b"test123", self.salt), expected)

    def test_text_password_is_utf8(self) -> None:
        self.assertEqual(
            derive_key("pässwörd", self.salt),
            derive_key("pässwörd".encode("utf-8"), self.salt),
        )

    def test_deterministic_and_salt_dependent(self) -> None:
        key = derive_key("pw", self.salt)
        self.assertEqual(len(key), 32)
        self.assertEqual(key, derive_key("pw", self.salt))
        self.assertNotEqual(key, derive_key("pw", bytes(16)))

    def test_empty_password_rejected(self) -> None:
        for password in ("", b""):
            with self.assertRaises(InvalidArgument):
                derive_key(password, self.salt)

    def test_wrong_salt_size_rejected(self) -> None:
        for salt in (b"", bytes(15), bytes(17), bytes(32)):
            with self.assertRaises(InvalidArgument):
                derive_key("pw", salt)

    def test_invalid_argument_is_value_error(self) -> None:
        with self.assertRaises(ValueError):
            derive_key("pw", b"short")


class ContainerCodecTests(unittest.TestCase):
    """Round trip, layout, tamper and malformed-input behavior."""

    def test_hello_world_vector(self) -> None:
        blob = encode(b"hello world", "test123")
        self.assertEqual(len(blob), 55)
        self.assertEqual(decode(blob, "test123"), b"hello world")
        with self.assertRaises(AuthenticationFailed):
            decode(blob, "wrong")

    def test_round_trip_various_sizes(self) -> None:
        codec = ContainerCodec()
        for size in (0, 1, 15, 16, 17, 1024, 70_000):
            plaintext = os.urandom(size)
            blob = codec.encode(plaintext, b"pw")
            self.assertEqual(len(blob), CONTAINER_HEADER_SIZE + size)
            self.assertEqual(codec.decode(blob, b"pw"), plaintext)

    def test_empty_plaintext_is_header_only(self) -> None:
        blob = encode(b"", "pw")
        self.assertEqual(len(blob), 44)
        self.assertEqual(decode(blob, "pw"), b"")

    def test_encoding_is_randomized(self) -> None:
        first = encode(b"same input", "pw")
        second = encode(b"same input", "pw")
        self.assertNotEqual(first, second)
        self.assertNotEqual(first[:16], second[:16])
        self.assertNotEqual(first[16:28], second[16:28])
        self.assertEqual(decode(first, "pw"), decode(second, "pw"))

    def test_layout_is_salt_nonce_tag_ciphertext(self) -> None:
        plaintext = b"layout check payload"
        blob = encode(plaintext, "pw")

        salt, nonce, tag, ciphertext = blob[:16], blob[16:28], blob[28:44], blob[44:]
        key = hashlib.pbkdf2_hmac("sha256", b"pw", salt, 100_000, 32)
        self.assertEqual(AESGCM(key).decrypt(nonce, ciphertext + tag, None), plaintext)

    def test_decodes_container_built_independently(self) -> None:
        salt, nonce = os.urandom(16), os.urandom(12)
        key = hashlib.pbkdf2_hmac("sha256", b"pw", salt, 100_000, 32)
        sealed = AESGCM(key).encrypt(nonce, b"external", None)
        blob = salt + nonce + sealed[-16:] + sealed[:-16]
        self.assertEqual(decode(blob, "pw"), b"external")

    def test_single_bit_flip_anywhere_fails(self) -> None:
        blob = encode(b"hello world", "test123")
        for index in range(len(blob)):
            tampered = bytearray(blob)
            tampered[index] ^= 1 << (index % 8)
            with self.subTest(index=index):
                with self.assertRaises(AuthenticationFailed):
                    decode(bytes(tampered), "test123")

    def test_wrong_password_fails(self) -> None:
        blob = encode(b"secret image", "right")
        for password in ("Right", "right ", "wrong", b"\x00"):
            with self.assertRaises(AuthenticationFailed):
                decode(blob, password)

    def test_short_input_rejected_before_derivation(self) -> None:
        with patch("familyvault.core.crypto.container.derive_key") as derive:
            for size in (0, 1, 28, 43):
                with self.assertRaises(MalformedContainer):
                    decode(os.urandom(size), "pw")
            derive.assert_not_called()

    def test_decode_failures_share_base_class(self) -> None:
        self.assertTrue(issubclass(MalformedContainer, DecryptionError))
        self.assertTrue(issubclass(AuthenticationFailed, DecryptionError))
        with self.assertRaises(DecryptionError):
            decode(os.urandom(44), "pw")

    def test_empty_password_rejected_on_encode(self) -> None:
        with self.assertRaises(InvalidArgument):
            encode(b"data", "")

    def test_entropy_failure_is_fatal(self) -> None:
        with patch("familyvault.core.crypto.aes_gcm.secrets.token_bytes", side_effect=OSError("no entropy")):
            with self.assertRaises(EntropyUnavailable):
                encode(b"data", "pw")

    def test_accepts_bytes_like_inputs(self) -> None:
        blob = encode(bytearray(b"abc"), bytearray(b"pw"))
        self.assertEqual(decode(bytearray(blob), "pw"), b"abc")

    def test_container_fields(self) -> None:
        blob = encode(b"xyz", "pw")
        parsed = Container.from_bytes(blob)
        self.assertEqual(len(parsed.salt), 16)
        self.assertEqual(len(parsed.nonce), 12)
        self.assertEqual(len(parsed.tag), 16)
        self.assertEqual(len(parsed.ciphertext), 3)
        self.assertEqual(len(parsed), 47)
        self.assertEqual(parsed.to_bytes(), blob)
        self.assertNotIn(parsed.salt.hex(), repr(parsed))


if __name__ == "__main__":
    unittest.main()
