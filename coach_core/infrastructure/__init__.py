"""Инфраструктурный слой: интеграция с внешними API."""
