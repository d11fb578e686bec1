"""Сервисный слой.

Модули:
    coach_service
        CoachService: операции фитнес-ассистента.
    operations
        Реестр описаний операций.
"""

from coach_core.services.coach_service import CoachService
from coach_core.services.operations import OPERATIONS, OperationSpec

__all__ = ["CoachService", "OPERATIONS", "OperationSpec"]
