"""Склейка последовательности изображений вдоль одной оси.

Принципы:
- SRP: сервис отвечает только за расчёт размеров и композицию; загрузка и
  сохранение живут в `ImageService`, ресэмплинг в `ResampleService`.
- Один и тот же коэффициент масштаба используется и для размера холста, и для
  размера каждого вставляемого изображения, поэтому сумма вставленных
  протяжённостей совпадает с размером холста.
"""
from __future__ import annotations

import logging
from typing import Optional, Sequence, Tuple

from PIL import Image

from photojoin.models.errors import NoImagesProvided
from photojoin.models.join_options import Direction, JoinOptions, ResizeFilter, Sizing
from photojoin.services.resample_service import ResampleService, match_depth

# Начальное значение свёртки для TO_SMALLEST (максимум u32)
SMALLEST_SENTINEL = 2 ** 32 - 1
# Палитровые и прочие режимы холста переводятся в RGBA
_CANVAS_MODES = ("L", "LA", "RGB", "RGBA", "I", "F")


def perpendicular_dimension(direction: Direction, image: Image.Image) -> int:
    """Размер поперёк оси склейки: высота для HORIZONTAL, ширина для VERTICAL."""
    return image.height if direction is Direction.HORIZONTAL else image.width


def join_dimension(direction: Direction, image: Image.Image) -> int:
    """Размер вдоль оси склейки: ширина для HORIZONTAL, высота для VERTICAL."""
    return image.width if direction is Direction.HORIZONTAL else image.height


def perpendicular_size(images: Sequence[Image.Image], options: JoinOptions) -> int:
    """Общий поперечный размер P: минимум или максимум по всем изображениям."""
    if options.sizing is Sizing.TO_SMALLEST:
        size, combine = SMALLEST_SENTINEL, min
    else:
        size, combine = 0, max
    for image in images:
        size = combine(size, perpendicular_dimension(options.direction, image))
    return size


def scale_factor(p: int, direction: Direction, image: Image.Image) -> float:
    """Коэффициент масштаба P / поперечный размер; 0.0 для вырожденного изображения."""
    dim = perpendicular_dimension(direction, image)
    if dim == 0:
        return 0.0
    return p / dim


def scaled_size(p: int, direction: Direction, image: Image.Image) -> Tuple[int, int]:
    """Размер (w, h) после масштабирования; протяжённость вдоль оси усекается."""
    extent = int(scale_factor(p, direction, image) * join_dimension(direction, image))
    if direction is Direction.HORIZONTAL:
        return extent, p
    return p, extent


def join_size(images: Sequence[Image.Image], p: int, direction: Direction) -> int:
    """Сумма усечённых протяжённостей всех изображений вдоль оси склейки."""
    total = 0
    for image in images:
        w, h = scaled_size(p, direction, image)
        total += w if direction is Direction.HORIZONTAL else h
    return total


class PhotoJoiner:
    def __init__(self, resample_service: Optional[ResampleService] = None) -> None:
        self.log = logging.getLogger("PhotoJoiner")
        self._resample = resample_service or ResampleService()

    def join(self, images: Sequence[Image.Image], options: JoinOptions) -> Image.Image:
        """Склеивает изображения в одно.

        Args:
            images: Упорядоченная последовательность декодированных изображений.
            options: Направление, политика размера и фильтр.

        Returns:
            Итоговое изображение. Для одного изображения возвращается оно же, без изменений.

        Raises:
            NoImagesProvided: если `images` пуст.
        """
        if not images:
            raise NoImagesProvided()
        if len(images) == 1:
            return images[0]
        self.log.info("Joining %d photos", len(images))

        direction = options.direction
        p = perpendicular_size(images, options)
        total = join_size(images, p, direction)
        if direction is Direction.HORIZONTAL:
            canvas_size = (total, p)
        else:
            canvas_size = (p, total)
        self.log.info("Determined output image size: %dx%d", *canvas_size)

        # Базовый слой: первое изображение на весь холст, без отдельной заливки
        canvas = self._resample.resize(images[0], canvas_size, ResizeFilter.NEAREST)
        if canvas.mode not in _CANVAS_MODES:
            canvas = canvas.convert("RGBA")

        pos = 0
        for image in images:
            w, h = scaled_size(p, direction, image)
            x, y = (pos, 0) if direction is Direction.HORIZONTAL else (0, pos)
            tile = self._resample.resize(image, (w, h), options.filter)
            self._overlay(canvas, tile, (x, y))
            self.log.debug("Overlayed image at %d,%d with size %dx%d", x, y, w, h)
            pos += w if direction is Direction.HORIZONTAL else h

        return canvas

    def _overlay(self, canvas: Image.Image, tile: Image.Image, position: Tuple[int, int]) -> None:
        """
        Накладывает `tile` на холст на месте.
        Прозрачные пиксели смешиваются оператором "over", непрозрачные замещают.
        """
        if tile.width == 0 or tile.height == 0 or canvas.width == 0 or canvas.height == 0:
            return
        tile = _with_alpha(tile)
        source = match_depth(tile, canvas.mode)
        if canvas.mode == "RGBA":
            canvas.alpha_composite(source.convert("RGBA"), dest=position)
        elif tile.mode in ("RGBA", "LA"):
            canvas.paste(source.convert(canvas.mode), position, tile)
        else:
            canvas.paste(source.convert(canvas.mode), position)


def _with_alpha(tile: Image.Image) -> Image.Image:
    """Палитровые и прочие изображения с прозрачностью переводятся в RGBA."""
    if tile.mode == "PA" or (tile.mode in ("P", "L", "RGB") and "transparency" in tile.info):
        return tile.convert("RGBA")
    return tile

