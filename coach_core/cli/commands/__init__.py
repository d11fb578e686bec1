"""CLI команды.

Модули:
    ask: coach ask / coach quick - вопросы к ассистенту.
    plan: coach plan / coach lookup - планы тренировок и видео упражнений.
    media: coach video / pose / edit / transcribe - работа с медиа.
    nutrition: coach food - распознавание еды и пищевая ценность.
    chat: coach chat - интерактивный стриминговый чат.
"""
