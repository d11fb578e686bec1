"""Base64-представление медиа на границе клиента.

Бинарные данные пересекают границу только как base64-текст плюс MIME-тип.

Функции:
    strip_data_url(value: str) -> str
        Убирает префикс data:<mime>;base64, если он есть.
    decode_base64(value: str) -> bytes
        Строгое декодирование с понятной ошибкой.
    encode_base64(data: bytes) -> str
        Кодирует байты ответа обратно в base64-текст.
    get_file_mime_type(file_path) -> str
        MIME-тип по имени файла.
    file_to_base64(file_path) -> tuple[str, str]
        Читает файл в (base64, mime_type), для CLI.
"""

import base64
import binascii
import mimetypes
import re
from pathlib import Path

from coach_core.utils.logger import get_logger

logger = get_logger(__name__)

EXTENSION_MIME_MAP: dict[str, str] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".webp": "image/webp",
    ".heic": "image/heic",
    ".mp3": "audio/mpeg",
    ".wav": "audio/wav",
    ".ogg": "audio/ogg",
    ".webm": "audio/webm",
    ".m4a": "audio/mp4",
    ".mp4": "video/mp4",
    ".mov": "video/quicktime",
}

_DATA_URL_RE = re.compile(r"^data:[\w.+/-]+;base64,", re.IGNORECASE)


def strip_data_url(value: str) -> str:
    """Убирает префикс data URL (как его отдаёт FileReader.readAsDataURL)."""
    return _DATA_URL_RE.sub("", value.strip(), count=1)


def decode_base64(value: str) -> bytes:
    """Декодирует base64-текст.

    Args:
        value: base64 строка, допускается префикс data URL.

    Returns:
        Исходные байты.

    Raises:
        ValueError: Если строка не является корректным base64.
    """
    try:
        return base64.b64decode(strip_data_url(value), validate=True)
    except (binascii.Error, ValueError) as e:
        raise ValueError(f"Invalid base64 payload: {e}") from e


def encode_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def get_file_mime_type(file_path: str | Path) -> str:
    """MIME-тип файла: сначала таблица расширений, затем mimetypes."""
    suffix = Path(file_path).suffix.lower()
    mime_type = EXTENSION_MIME_MAP.get(suffix) or mimetypes.guess_type(str(file_path))[0]
    return mime_type or "application/octet-stream"


def file_to_base64(file_path: str | Path) -> tuple[str, str]:
    """Читает файл и возвращает (base64, mime_type).

    Raises:
        FileNotFoundError: Если файла нет.
    """
    path = Path(file_path)
    data = path.read_bytes()
    mime_type = get_file_mime_type(path)
    logger.debug(
        "File encoded",
        path=str(path),
        size_kb=round(len(data) / 1024, 1),
        mime_type=mime_type,
    )
    return encode_base64(data), mime_type
