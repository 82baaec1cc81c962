from __future__ import annotations

import logging
from typing import Tuple

import numpy as np
from PIL import Image

from pngblue.constants import NRGBA_MAX_DEPTH, TARGET_RGB
from pngblue.models.image_model import (
    COLOR_GRAY,
    COLOR_GRAY_ALPHA,
    COLOR_PALETTE,
    COLOR_RGB,
    COLOR_RGBA,
    ImageData,
    ScanResult,
)

logger = logging.getLogger(__name__)

# sub-byte gray samples and their tRNS key are widened by these factors
_GRAY_SCALE = {1: 0xFF, 2: 0x55, 4: 0x11, 8: 0x01}


class ProcessService:
    def is_nrgba(self, image_data: ImageData) -> bool:
        """
        Читаются ли все пиксели как неумноженный 8-битный RGBA.
        """
        _rgba, readable = self._decode_nrgba(image_data)
        return bool(readable.all())

    # ---------- Вспомогательные функции ----------
    def _decode_nrgba(self, image_data: ImageData) -> Tuple[np.ndarray, np.ndarray]:
        """
        Возвращает (rgba, readable): массив uint8 формы (H, W, 4) и булеву маску (H, W)
        пикселей, которые кодек PNG отдаёт как неумноженный 8-битный RGBA:
        - RGBA и серый+альфа глубиной 8 бит: все пиксели;
        - RGB 8 бит и серый до 8 бит с tRNS: все пиксели, альфа 0 у цвета-ключа;
        - палитра: только индексы, покрытые таблицей tRNS;
        - всё остальное (16 бит, без tRNS): ни одного.
        Исходное изображение не мутирует.
        """
        image = image_data.pil_image
        header = image_data.header
        h, w = image_data.height, image_data.width
        none_readable = np.zeros((h, w), dtype=bool)
        all_readable = np.ones((h, w), dtype=bool)
        empty = np.zeros((h, w, 4), dtype=np.uint8)

        if header.bit_depth > NRGBA_MAX_DEPTH:
            return empty, none_readable

        ct = header.color_type
        trns = header.trns
        if ct in (COLOR_RGBA, COLOR_GRAY_ALPHA):
            return np.array(image.convert("RGBA"), dtype=np.uint8), all_readable
        if ct == COLOR_RGB and trns is not None:
            rgb = np.array(image, dtype=np.uint8)
            key = np.array([trns[1], trns[3], trns[5]], dtype=np.uint8)
            return self._with_key_alpha(rgb, (rgb == key).all(axis=-1)), all_readable
        if ct == COLOR_GRAY and trns is not None:
            if image.mode == "1":
                gray = np.array(image, dtype=np.uint8) * 255
            else:
                gray = np.array(image, dtype=np.uint8)
            key = (trns[1] * _GRAY_SCALE[header.bit_depth]) & 0xFF
            rgb = np.repeat(gray[..., None], 3, axis=-1)
            return self._with_key_alpha(rgb, gray == key), all_readable
        if ct == COLOR_PALETTE:
            return self._palette_to_rgba(image, (trns or b"")[:256])

        return empty, none_readable

    def _with_key_alpha(self, rgb: np.ndarray, transparent: np.ndarray) -> np.ndarray:
        """
        Добавляет альфа-канал: 0 там, где цвет совпал с ключом tRNS, иначе 255.
        """
        alpha = np.where(transparent, 0, 255).astype(np.uint8)
        return np.concatenate([rgb, alpha[..., None]], axis=-1)

    def _palette_to_rgba(self, image: Image.Image, trns: bytes) -> Tuple[np.ndarray, np.ndarray]:
        """
        Разворачивает индексы палитры в RGBA. Альфа берётся из сырого tRNS:
        Pillow хранит его сокращённо, когда прозрачен ровно один индекс.
        """
        idx = np.array(image, dtype=np.uint8)
        flat = np.array(image.getpalette() or [], dtype=np.uint8)[:256 * 3]
        palette = np.zeros((256, 3), dtype=np.uint8)
        palette[: len(flat) // 3] = flat[: len(flat) // 3 * 3].reshape(-1, 3)
        alpha = np.full(256, 255, dtype=np.uint8)
        alpha[: len(trns)] = np.frombuffer(trns, dtype=np.uint8)

        rgba = np.concatenate([palette[idx], alpha[idx][..., None]], axis=-1)
        return rgba, idx < len(trns)

    def _black_mask(self, arr: np.ndarray) -> np.ndarray:
        """
        Булева маска (H, W): сумма R+G+B равна нулю.
        Сумма в uint16, чтобы (1, 255, 0) не переполнялась до нуля.
        """
        return arr[..., :3].sum(axis=-1, dtype=np.uint16) == 0

    # ---------- Перекраска чёрного в голубой ----------
    def recolor_black(self, image_data: ImageData) -> ScanResult:
        """
        Проход по всем пикселям:
        - R+G+B == 0 -> (0, 255, 255, A)
        - иначе пиксель копируется без изменений (все четыре канала)
        Возвращает `ScanResult` с новым RGBA-изображением тех же размеров либо
        координаты первого нечитаемого пикселя (обход по x, затем по y).
        """
        arr, readable = self._decode_nrgba(image_data)
        if not readable.all():
            # x-major order: first column first
            x, y = (int(v) for v in np.argwhere(~readable.T)[0])
            logger.debug("unreadable pixel at (%d, %d) in %s", x, y, image_data.path)
            return ScanResult.unsupported(x, y)

        mask = self._black_mask(arr)
        out = arr.copy()
        out[mask, :3] = TARGET_RGB
        logger.debug("recolored %d of %d pixels", int(mask.sum()), mask.size)
        return ScanResult.success(Image.fromarray(out))
