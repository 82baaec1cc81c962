"""Модели данных для перекраски.

Принципы:
- SRP: только структуры данных, без логики обработки.
- Чистый код: неизменяемость (`frozen=True`) для предсказуемости.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from PIL import Image


Bounds = Tuple[int, int, int, int]

# IHDR color types
COLOR_GRAY = 0
COLOR_RGB = 2
COLOR_PALETTE = 3
COLOR_GRAY_ALPHA = 4
COLOR_RGBA = 6


@dataclass(frozen=True)
class PngHeader:
    """Сведения из служебных чанков PNG, которые Pillow не сохраняет как есть.

    Fields:
        bit_depth: Бит на канал (или на индекс палитры) из IHDR.
        color_type: Тип цвета из IHDR.
        palette_size: Число записей в PLTE (0, если чанка нет).
        trns: Сырые байты tRNS или None.
    """
    bit_depth: int
    color_type: int
    palette_size: int = 0
    trns: Optional[bytes] = None


@dataclass(frozen=True)
class ImageData:
    """Неизменяемая модель декодированного изображения и его метаданные.

    Fields:
        path: Путь к исходному файлу.
        pil_image: Загруженное изображение PIL (режим не меняется при загрузке).
        width: Ширина, px.
        height: Высота, px.
        mode: Режим PIL, например "RGBA".
        header: Глубина, тип цвета и прозрачность из заголовка PNG.
    """
    path: Path
    pil_image: Image.Image
    width: int
    height: int
    mode: str
    header: PngHeader

    @property
    def bounds(self) -> Bounds:
        """Границы сетки пикселей: (min_x, min_y, max_x, max_y)."""
        return (0, 0, self.width, self.height)


@dataclass(frozen=True)
class ScanResult:
    """Итог прохода по пикселям одного изображения.

    Fields:
        ok: Все пиксели прочитаны как неумноженный RGBA.
        image: Новое изображение RGBA (только при `ok`).
        bad_pixel: Координаты (x, y) первого нечитаемого пикселя при обходе
            по столбцам (только при неуспехе).
    """
    ok: bool
    image: Optional[Image.Image] = None
    bad_pixel: Optional[Tuple[int, int]] = None

    @classmethod
    def success(cls, image: Image.Image) -> "ScanResult":
        return cls(ok=True, image=image)

    @classmethod
    def unsupported(cls, x: int, y: int) -> "ScanResult":
        return cls(ok=False, bad_pixel=(x, y))
