"""Тесты utils/media.py."""

import base64

import pytest

from coach_core.utils.media import (
    decode_base64,
    encode_base64,
    file_to_base64,
    get_file_mime_type,
    strip_data_url,
)


class TestBase64:
    def test_strip_data_url(self):
        assert strip_data_url("data:image/png;base64,QUJD") == "QUJD"
        assert strip_data_url("  QUJD ") == "QUJD"

    def test_decode(self):
        assert decode_base64("QUJD") == b"ABC"
        assert decode_base64("data:audio/webm;base64,QUJD") == b"ABC"

    def test_decode_invalid(self):
        with pytest.raises(ValueError, match="Invalid base64"):
            decode_base64("not base64!!")

    def test_encode(self):
        assert encode_base64(b"ABC") == "QUJD"


class TestFiles:
    @pytest.mark.parametrize(
        "name,mime",
        [
            ("squat.JPG", "image/jpeg"),
            ("pose.png", "image/png"),
            ("note.webm", "audio/webm"),
            ("blob.unknownext", "application/octet-stream"),
        ],
    )
    def test_mime_type(self, name, mime):
        assert get_file_mime_type(name) == mime

    def test_file_to_base64(self, tmp_path):
        path = tmp_path / "meal.jpg"
        path.write_bytes(b"\xff\xd8jpeg")

        data, mime_type = file_to_base64(path)

        assert base64.b64decode(data) == b"\xff\xd8jpeg"
        assert mime_type == "image/jpeg"

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            file_to_base64(tmp_path / "missing.png")
