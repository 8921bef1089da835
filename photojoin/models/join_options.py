"""Параметры склейки: направление, политика размера, фильтр ресэмплинга.

Принципы:
- SRP: только значения и их разбор из строк, без обработки изображений.
- Неизменяемость (`frozen=True`): опции передаются в сервис как значение.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Tuple, Type, TypeVar

from photojoin.models.errors import ConfigurationError

_E = TypeVar("_E", bound="_ChoiceEnum")


class _ChoiceEnum(str, Enum):
    """Enum, значения которого совпадают с написанием в командной строке."""

    @classmethod
    def parse(cls: Type[_E], value: str) -> _E:
        """Разбирает строку без учёта регистра.

        Raises:
            ConfigurationError: если значение не входит в допустимый набор.
        """
        try:
            return cls(value.strip().lower())
        except ValueError as exc:
            allowed = ", ".join(cls.choices())
            raise ConfigurationError(f"Недопустимое значение {value!r}, ожидается одно из: {allowed}") from exc

    @classmethod
    def choices(cls) -> Tuple[str, ...]:
        return tuple(member.value for member in cls)


class Direction(_ChoiceEnum):
    """Ось, вдоль которой склеиваются изображения."""
    HORIZONTAL = "horizontal"  # слева направо, общая высота
    VERTICAL = "vertical"  # сверху вниз, общая ширина


class Sizing(_ChoiceEnum):
    """Политика выбора общего поперечного размера."""
    TO_SMALLEST = "to_smallest"
    TO_LARGEST = "to_largest"


class ResizeFilter(_ChoiceEnum):
    NEAREST = "nearest"
    TRIANGLE = "triangle"
    CATMULL_ROM = "catmull_rom"
    GAUSSIAN = "gaussian"
    LANCZOS3 = "lanczos3"


@dataclass(frozen=True)
class JoinOptions:
    """Опции склейки.

    Fields:
        direction: Ось склейки (обязательна).
        sizing: К наименьшему или наибольшему поперечному размеру.
        filter: Фильтр ресэмплинга; влияет только на качество, не на размеры.
    """
    direction: Direction
    sizing: Sizing = Sizing.TO_SMALLEST
    filter: ResizeFilter = ResizeFilter.GAUSSIAN


@dataclass(frozen=True)
class JoinConfig:
    """Полная конфигурация одного запуска (входы, выход, опции)."""
    inputs: Tuple[Path, ...]
    output: Path
    options: JoinOptions
    override_output: bool = False
