"""Загрузка изображений с диска и сохранение результата склейки.

Принципы:
- SRP: класс отвечает только за декодирование/кодирование и базовые метаданные.
- Ошибки ввода-вывода поднимаются наружу до вызова склейки; склейка получает
  только успешно декодированные изображения.
"""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Iterable, List, Optional

from PIL import Image, UnidentifiedImageError

from photojoin.models.image_model import SourceImage
from photojoin.services.resample_service import WIDE_MODES, match_depth

# Форматы, которые не умеют хранить альфа-канал
_NO_ALPHA_FORMATS = ("JPEG",)


def expand_path(file_path: str | Path) -> Path:
    """Раскрывает `~` в пути."""
    return Path(os.path.expanduser(str(file_path)))


class ImageService:
    def __init__(self) -> None:
        self.log = logging.getLogger("ImageService")

    def load_image(self, file_path: str | Path) -> SourceImage:
        """Загружает изображение с диска и возвращает его вместе с метаданными.

        Args:
            file_path: Путь до файла изображения (допускается `~`).

        Returns:
            `SourceImage` c полностью загруженным `PIL.Image.Image` и размером файла.

        Raises:
            FileNotFoundError: если путь не существует или не указывает на файл.
            ValueError: если файл не распознан как изображение или повреждён.
        """
        path = expand_path(file_path)
        if not path.exists() or not path.is_file():
            raise FileNotFoundError(f"Файл не найден: {path}")

        self.log.info("Opening %s", path)
        try:
            pil_image = Image.open(path)
            pil_image.load()
        except UnidentifiedImageError as exc:
            raise ValueError(f"Файл не является изображением: {path}") from exc
        except OSError as exc:
            raise ValueError(f"Не удалось декодировать изображение: {path}") from exc

        try:
            size_bytes: Optional[int] = path.stat().st_size
        except OSError:
            size_bytes = None

        source = SourceImage(path=path, pil_image=pil_image, size_bytes=size_bytes)
        self.log.debug("Decoded %s", source.describe())
        return source

    def load_images(self, file_paths: Iterable[str | Path]) -> List[SourceImage]:
        """Загружает изображения по порядку; первая же ошибка прерывает загрузку."""
        return [self.load_image(p) for p in file_paths]

    def check_output(self, file_path: str | Path, override_output: bool = False) -> Path:
        """Проверяет, что результат можно записать по пути `file_path`.

        Raises:
            FileExistsError: если файл существует и `override_output` не задан.
        """
        path = expand_path(file_path)
        if path.exists() and not override_output:
            raise FileExistsError(f"Файл уже существует: {path}")
        return path

    def save_image(self, image: Image.Image, file_path: str | Path, override_output: bool = False) -> Path:
        """Сохраняет изображение; формат определяется по расширению.

        Raises:
            FileExistsError: если файл существует и `override_output` не задан.
            ValueError: если расширение не соответствует известному формату.
        """
        path = self.check_output(file_path, override_output)
        fmt = Image.registered_extensions().get(path.suffix.lower())
        if fmt is None:
            raise ValueError(f"Неизвестный формат файла: {path}")

        if fmt in _NO_ALPHA_FORMATS and image.mode in WIDE_MODES:
            image = match_depth(image, "L")
        if fmt in _NO_ALPHA_FORMATS and image.mode not in ("RGB", "L"):
            self.log.debug("Flattening %s image to RGB for %s", image.mode, fmt)
            image = image.convert("RGB")

        image.save(path, format=fmt)
        self.log.info("Saved joined photo to %s", path)
        return path
