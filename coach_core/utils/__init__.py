"""Вспомогательные модули: логирование и base64-медиа."""
