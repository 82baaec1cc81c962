"""Контроллер: цикл по аргументам командной строки.

SOLID:
- SRP: класс решает, что делать с каждым аргументом (пропустить, обработать),
  а ввод-вывод и пиксели делегирует сервисам.
- DIP: сервисы передаются как поля, в тестах их можно подменить.
Clean Code:
- Пропуски обрабатываются здесь же; фатальные ошибки (`FatalError`) не
  перехватываются и уходят наверх, в точку входа.
"""
from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable

from pngblue.constants import MSG_ONLY_NRGBA, MSG_ONLY_PNG
from pngblue.services.image_service import ImageService, has_png_extension, output_path_for
from pngblue.services.process_service import ProcessService

logger = logging.getLogger(__name__)


class FileOutcome(enum.Enum):
    WRITTEN = "written"
    SKIPPED_EXTENSION = "skipped_extension"
    SKIPPED_COLOR_MODEL = "skipped_color_model"


@dataclass
class RunSummary:
    counts: Dict[FileOutcome, int] = field(default_factory=lambda: {o: 0 for o in FileOutcome})

    def add(self, outcome: FileOutcome) -> None:
        self.counts[outcome] += 1

    @property
    def written(self) -> int:
        return self.counts[FileOutcome.WRITTEN]

    @property
    def skipped(self) -> int:
        return self.counts[FileOutcome.SKIPPED_EXTENSION] + self.counts[FileOutcome.SKIPPED_COLOR_MODEL]


@dataclass
class RecolorController:
    """Перекрашивает файлы по одному, строго последовательно.

    Ответственности:
    - Проверка расширения до любого чтения с диска.
    - Загрузка через `ImageService`, проход по пикселям через `ProcessService`.
    - Запись результата рядом с исходником (`<имя>-blue.png`).
    """
    image_service: ImageService = field(default_factory=ImageService)
    process_service: ProcessService = field(default_factory=ProcessService)

    def run(self, args: Iterable[str]) -> RunSummary:
        summary = RunSummary()
        for arg in args:
            summary.add(self.process_file(arg))
        return summary

    def process_file(self, arg: str) -> FileOutcome:
        """Обрабатывает один аргумент.

        Raises:
            ImageLoadError, ImageSaveError: фатально, оставшиеся аргументы не обрабатываются.
        """
        if not has_png_extension(arg):
            logger.warning(MSG_ONLY_PNG)
            return FileOutcome.SKIPPED_EXTENSION

        image_data = self.image_service.load_image(arg)

        result = self.process_service.recolor_black(image_data)
        if not result.ok:
            logger.debug("%s: mode %s, first unreadable pixel %s", image_data.path, image_data.mode, result.bad_pixel)
            logger.warning(MSG_ONLY_NRGBA)
            return FileOutcome.SKIPPED_COLOR_MODEL

        out_path = self.image_service.save_image(result.image, output_path_for(arg))
        logger.debug("wrote %s", out_path)
        return FileOutcome.WRITTEN
