"""Иерархия исключений photojoin."""


class PhotoJoinError(Exception):
    """Базовое исключение пакета."""


class NoImagesProvided(PhotoJoinError):
    """Склейка вызвана с пустым списком изображений."""

    def __init__(self) -> None:
        super().__init__("Не передано ни одного изображения для склейки")


class ConfigurationError(PhotoJoinError):
    """Противоречивые или недопустимые параметры запуска."""
