"""Ошибки перекраски.

Пропуск файла (не то расширение, не та цветовая модель) ошибкой не считается
и обрабатывается контроллером на месте. Исключения здесь только для фатальных
сбоев, которые завершают весь запуск.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pngblue.constants import FATAL_EXIT_CODE


@dataclass
class RecolorError(Exception):
    message: str
    path: Optional[Path] = None
    exit_code: int = FATAL_EXIT_CODE

    def __str__(self) -> str:
        return self.message


class FatalError(RecolorError):
    """Останавливает обработку всех оставшихся аргументов."""


class ImageLoadError(FatalError):
    pass


class ImageSaveError(FatalError):
    pass
