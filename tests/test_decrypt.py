import base64
import os
import unittest
from pathlib import Path
from tempfile import TemporaryDirectory

from familyvault.core.crypto import AuthenticationFailed, DecryptionError, MalformedContainer, encode
from familyvault.core.file_ops import (
    BatchPipeline,
    DecryptPipeline,
    decrypt_directory,
    decrypt_file,
    decrypt_to_data_url,
    decrypt_to_file,
)
from familyvault.utils.validators import NoEligibleFiles

JPEG_BYTES = b"\xff\xd8\xff\xe0" + b"\x00" * 32


class DecryptHelperTests(unittest.TestCase):
    """Single-container decoding to bytes, files and data URLs."""

    def setUp(self) -> None:
        self.tmpdir = TemporaryDirectory()
        self.tmp_path = Path(self.tmpdir.name)
        self.container_path = self.tmp_path / "paris-easy1.jpg"
        self.container_path.write_bytes(encode(JPEG_BYTES, "pw"))

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_decrypt_file(self) -> None:
        self.assertEqual(decrypt_file(self.container_path, "pw"), JPEG_BYTES)

    def test_decrypt_file_wrong_password(self) -> None:
        with self.assertRaises(AuthenticationFailed):
            decrypt_file(self.container_path, "nope")

    def test_decrypt_file_truncated(self) -> None:
        self.container_path.write_bytes(b"\x00" * 20)
        with self.assertRaises(MalformedContainer):
            decrypt_file(self.container_path, "pw")

    def test_decrypt_to_file(self) -> None:
        target = self.tmp_path / "plain" / "paris-easy1.jpg"
        written = decrypt_to_file(self.container_path, target, "pw")
        self.assertEqual(written, len(JPEG_BYTES))
        self.assertEqual(target.read_bytes(), JPEG_BYTES)

    def test_decrypt_to_file_writes_nothing_on_failure(self) -> None:
        target = self.tmp_path / "plain" / "paris-easy1.jpg"
        with self.assertRaises(AuthenticationFailed):
            decrypt_to_file(self.container_path, target, "nope")
        self.assertFalse(target.exists())

    def test_data_url_defaults_to_jpeg(self) -> None:
        url = decrypt_to_data_url(self.container_path.read_bytes(), "pw")
        prefix = "data:image/jpeg;base64,"
        self.assertTrue(url.startswith(prefix))
        self.assertEqual(base64.b64decode(url[len(prefix):]), JPEG_BYTES)

    def test_data_url_guesses_type_from_filename(self) -> None:
        blob = encode(b"\x89PNG\r\n\x1a\n", "pw")
        url = decrypt_to_data_url(blob, "pw", filename="rome-hard2.png")
        self.assertTrue(url.startswith("data:image/png;base64,"))

    def test_data_url_explicit_type_wins(self) -> None:
        url = decrypt_to_data_url(self.container_path.read_bytes(), "pw", mime_type="image/webp", filename="x.png")
        self.assertTrue(url.startswith("data:image/webp;base64,"))

    def test_data_url_rejects_empty_plaintext(self) -> None:
        with self.assertRaises(DecryptionError):
            decrypt_to_data_url(encode(b"", "pw"), "pw")


class DecryptPipelineTests(unittest.TestCase):
    """Directory decryption mirrors the encryption pipeline."""

    def setUp(self) -> None:
        self.tmpdir = TemporaryDirectory()
        self.tmp_path = Path(self.tmpdir.name)
        self.source = self.tmp_path / "images"
        self.encrypted = self.tmp_path / "encrypted"
        self.restored = self.tmp_path / "restored"
        self.source.mkdir()
        self.contents = {}
        for name in ("a.jpg", "b.png", "c.gif"):
            data = os.urandom(128)
            (self.source / name).write_bytes(data)
            self.contents[name] = data
        BatchPipeline().run(self.source, self.encrypted, "pw")

    def tearDown(self) -> None:
        self.tmpdir.cleanup()

    def test_round_trip_directory(self) -> None:
        result = decrypt_directory(self.encrypted, self.restored, "pw")
        self.assertEqual(set(result.succeeded), set(self.contents))
        for name, data in self.contents.items():
            self.assertEqual((self.restored / name).read_bytes(), data)

    def test_tampered_container_is_isolated(self) -> None:
        blob = bytearray((self.encrypted / "b.png").read_bytes())
        blob[-1] ^= 0x80
        (self.encrypted / "b.png").write_bytes(bytes(blob))

        result = DecryptPipeline(workers=2).run(self.encrypted, self.restored, "pw")

        self.assertEqual(set(result.succeeded), {"a.jpg", "c.gif"})
        self.assertEqual([name for name, _ in result.failures], ["b.png"])
        self.assertFalse((self.restored / "b.png").exists())

    def test_wrong_password_fails_every_file(self) -> None:
        result = decrypt_directory(self.encrypted, self.restored, "nope")
        self.assertEqual(result.succeeded_count, 0)
        self.assertEqual(result.failed_count, 3)
        self.assertEqual(os.listdir(self.restored), [])

    def test_no_containers(self) -> None:
        empty = self.tmp_path / "empty"
        empty.mkdir()
        with self.assertRaises(NoEligibleFiles):
            decrypt_directory(empty, self.restored, "pw")
        self.assertFalse(self.restored.exists())


if __name__ == "__main__":
    unittest.main()
