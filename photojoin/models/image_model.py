"""Модель входного изображения для склейки.

Принципы:
- Только данные: размеры и режим берутся из самого изображения PIL, чтобы
  метаданные не расходились с пикселями.
- Неизменяемость (`frozen=True`).
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image


@dataclass(frozen=True)
class SourceImage:
    """Декодированный входной файл.

    Fields:
        path: Путь к исходному файлу (после раскрытия `~`).
        pil_image: Полностью загруженное изображение PIL в исходном режиме.
        size_bytes: Размер файла, если доступен.
    """
    path: Path
    pil_image: Image.Image
    size_bytes: Optional[int] = None

    @property
    def width(self) -> int:
        return self.pil_image.width

    @property
    def height(self) -> int:
        return self.pil_image.height

    @property
    def mode(self) -> str:
        return self.pil_image.mode

    def describe(self) -> str:
        return f"{self.path.name} {self.width}x{self.height} {self.mode}"
