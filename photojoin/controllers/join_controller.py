"""Контроллер склейки: оркестрация загрузки, склейки и сохранения.

SOLID:
- SRP: класс связывает сервисы между собой, не содержит логики обработки изображений.
- DIP: сервисы передаются снаружи (по умолчанию создаются конкретные реализации).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from photojoin.models.join_options import Direction, JoinConfig, Sizing
from photojoin.services.image_service import ImageService
from photojoin.services.join_service import PhotoJoiner

log = logging.getLogger("JoinController")


@dataclass
class JoinResult:
    """Итог запуска: путь к файлу и размеры результата."""
    output: Path
    width: int
    height: int
    image_count: int


@dataclass
class JoinController:
    """Выполняет один запуск по `JoinConfig`.

    Ответственности:
    - Загрузка входов через `ImageService` (ошибки декодирования всплывают до склейки).
    - Склейка через `PhotoJoiner`.
    - Сохранение результата через `ImageService`.
    """
    image_service: ImageService = field(default_factory=ImageService)
    joiner: PhotoJoiner = field(default_factory=PhotoJoiner)

    def run(self, config: JoinConfig) -> JoinResult:
        options = config.options
        log.info(
            "Joining photos %s with filter: %s",
            "horizontally" if options.direction is Direction.HORIZONTAL else "vertically",
            options.filter.value,
        )
        if options.sizing is Sizing.TO_SMALLEST:
            log.info("Resizing to smallest image")
        else:
            log.info("Resizing to largest image")

        # выход проверяется до декодирования входов
        self.image_service.check_output(config.output, config.override_output)
        loaded = self.image_service.load_images(config.inputs)
        output_image = self.joiner.join([item.pil_image for item in loaded], options)
        log.info("Generated %dx%d image", output_image.width, output_image.height)

        path = self.image_service.save_image(output_image, config.output, config.override_output)
        return JoinResult(
            output=path,
            width=output_image.width,
            height=output_image.height,
            image_count=len(loaded),
        )
