from __future__ import annotations

import logging
import math
from typing import Dict, Tuple

import numpy as np
from PIL import Image

from photojoin.models.join_options import ResizeFilter

# Фильтры, которые PIL умеет сам
_PIL_FILTERS: Dict[ResizeFilter, Image.Resampling] = {
    ResizeFilter.NEAREST: Image.Resampling.NEAREST,
    ResizeFilter.TRIANGLE: Image.Resampling.BILINEAR,
    ResizeFilter.CATMULL_ROM: Image.Resampling.BICUBIC,
    ResizeFilter.LANCZOS3: Image.Resampling.LANCZOS,
}

_GAUSSIAN_SIGMA = 0.5
_GAUSSIAN_SUPPORT = 3.0
_NUMPY_MODES = ("L", "LA", "RGB", "RGBA", "I", "F")
# Режимы с разрядностью больше 8 бит
WIDE_MODES = ("I", "F")


def widen_mode(image: Image.Image) -> Image.Image:
    """16-битные режимы ("I;16", "I;16B", ...) переводятся в "I" без потери значений."""
    if image.mode.startswith("I;16"):
        return image.convert("I")
    return image


def match_depth(image: Image.Image, mode: str) -> Image.Image:
    """
    Приводит разрядность изображения к разрядности режима `mode`: 16-битный
    диапазон отображается в 8-битный и обратно с шагом 257.
    """
    image_wide = image.mode in WIDE_MODES
    target_wide = mode in WIDE_MODES
    if image_wide and not target_wide:
        arr = np.asarray(image, dtype=np.float64) / 257.0
        return Image.fromarray(np.clip(np.rint(arr), 0, 255).astype(np.uint8))
    if target_wide and not image_wide:
        return Image.fromarray(np.asarray(image.convert("L"), dtype=np.int32) * 257)
    return image


class ResampleService:
    def __init__(self) -> None:
        self.log = logging.getLogger("ResampleService")

    def resize(self, image: Image.Image, size: Tuple[int, int], resize_filter: ResizeFilter) -> Image.Image:
        """
        Изменение размера до точного `size` = (ширина, высота) без сохранения пропорций.
        Пустой источник или пустой целевой размер дают пустое изображение нужного размера.
        16-битные изображения возвращаются в режиме "I".
        """
        image = widen_mode(image)
        width, height = size
        if width <= 0 or height <= 0 or image.width == 0 or image.height == 0:
            return Image.new(image.mode, (max(width, 0), max(height, 0)))
        if image.size == (width, height):
            return image.copy()

        if resize_filter is ResizeFilter.GAUSSIAN:
            return self._resize_gaussian(image, width, height)
        return image.resize((width, height), resample=_PIL_FILTERS[resize_filter])

    # ---------- Гауссов фильтр (в PIL отсутствует) ----------
    def _resize_gaussian(self, image: Image.Image, width: int, height: int) -> Image.Image:
        """
        Сепарабельная свёртка: сначала по вертикали, затем по горизонтали.
        Ядро расширяется пропорционально коэффициенту уменьшения.
        """
        if image.mode not in _NUMPY_MODES:
            self.log.debug("Converting %s image to RGBA for gaussian resize", image.mode)
            image = image.convert("RGBA")

        arr = np.asarray(image, dtype=np.float64 if image.mode == "I" else np.float32)
        if arr.ndim == 2:
            arr = arr[:, :, np.newaxis]

        rows, row_weights = self._gaussian_window(image.height, height)
        cols, col_weights = self._gaussian_window(image.width, width)
        out = self._sample_axis(arr, rows, row_weights, axis=0)
        out = self._sample_axis(out, cols, col_weights, axis=1)

        if out.shape[2] == 1:
            out = out[:, :, 0]
        if image.mode == "F":
            return Image.fromarray(out.astype(np.float32))
        if image.mode == "I":
            info = np.iinfo(np.int32)
            return Image.fromarray(np.clip(np.rint(out), info.min, info.max).astype(np.int32))
        return Image.fromarray(np.clip(np.rint(out), 0, 255).astype(np.uint8))

    def _gaussian_window(self, src_len: int, dst_len: int) -> Tuple[np.ndarray, np.ndarray]:
        """
        Окно ядра для каждого выходного пикселя.
        Возвращает индексы источника (dst_len, k) и веса (dst_len, k); веса
        за пределами окна равны нулю, каждая строка нормирована к 1.
        """
        ratio = src_len / dst_len
        sratio = max(ratio, 1.0)
        support = _GAUSSIAN_SUPPORT * sratio

        centers = (np.arange(dst_len, dtype=np.float64) + 0.5) * ratio
        left = np.clip(np.floor(centers - support), 0, src_len - 1).astype(np.int64)
        right = np.clip(np.ceil(centers + support), left + 1, src_len).astype(np.int64)
        taps = int((right - left).max())

        idx = left[:, np.newaxis] + np.arange(taps)[np.newaxis, :]
        inside = idx < right[:, np.newaxis]
        idx = np.minimum(idx, src_len - 1)

        dist = (idx - (centers[:, np.newaxis] - 0.5)) / sratio
        weights = np.exp(-(dist ** 2) / (2.0 * _GAUSSIAN_SIGMA ** 2)) / (math.sqrt(2.0 * math.pi) * _GAUSSIAN_SIGMA)
        weights = np.where(inside, weights, 0.0)
        totals = weights.sum(axis=1, keepdims=True)
        # избегаем деления на ноль
        with np.errstate(divide="ignore", invalid="ignore"):
            weights = np.where(totals > 0, weights / totals, 0.0)
        return idx, weights

    def _sample_axis(self, arr: np.ndarray, idx: np.ndarray, weights: np.ndarray, axis: int) -> np.ndarray:
        """
        Взвешенная сумма по окну вдоль `axis`: по одному проходу на отвод ядра,
        стоимость пропорциональна выходу, а не произведению размеров.
        """
        shape = [1] * arr.ndim
        shape[axis] = -1
        out = np.zeros_like(np.take(arr, idx[:, 0], axis=axis))
        for k in range(idx.shape[1]):
            out += np.take(arr, idx[:, k], axis=axis) * weights[:, k].reshape(shape).astype(arr.dtype)
        return out
