"""Чтение и запись PNG на диск, правила именования файлов.

Принципы:
- SRP: сервис отвечает только за ввод-вывод и метаданные, пиксели не трогает.
- Только PNG: другие форматы под именем *.png считаются ошибкой декодирования.
- Ошибки ввода-вывода и кодека превращаются в `ImageLoadError` / `ImageSaveError`.
"""
from __future__ import annotations

import logging
import os
import struct
from pathlib import Path
from typing import Optional

from PIL import Image, UnidentifiedImageError

from pngblue.constants import OUTPUT_SUFFIX, PNG_EXTENSION, PNG_SIGNATURE
from pngblue.exceptions import ImageLoadError, ImageSaveError
from pngblue.models.image_model import (
    COLOR_GRAY,
    COLOR_GRAY_ALPHA,
    COLOR_PALETTE,
    COLOR_RGB,
    COLOR_RGBA,
    ImageData,
    PngHeader,
)

logger = logging.getLogger(__name__)


def file_extension(path: str) -> str:
    """Расширение последнего элемента пути, начиная с последней точки.

    Пустая строка, если точки в имени нет. Путь не нормализуется:
    для "dir.png/" расширения нет.
    """
    for i in range(len(path) - 1, -1, -1):
        ch = path[i]
        if ch in ("/", os.sep):
            break
        if ch == ".":
            return path[i:]
    return ""


def has_png_extension(path: str) -> bool:
    # case-sensitive: "a.PNG" is rejected
    return file_extension(path) == PNG_EXTENSION


def output_path_for(path: str) -> str:
    """`photo.png` -> `photo-blue.png`, каталог сохраняется как есть."""
    return path[: -len(PNG_EXTENSION)] + OUTPUT_SUFFIX


def read_png_header(path: Path) -> PngHeader:
    """Читает IHDR, PLTE и tRNS до первого IDAT.

    Pillow сводит 16 бит к 8 и хранит tRNS палитры в сокращённом виде,
    поэтому глубина и сырая таблица прозрачности берутся прямо из чанков.

    Raises:
        ImageLoadError: заголовок повреждён или tRNS не соответствует типу цвета.
    """
    ihdr = None
    palette_size = 0
    trns: Optional[bytes] = None
    try:
        with open(path, "rb") as fh:
            if fh.read(len(PNG_SIGNATURE)) != PNG_SIGNATURE:
                raise ImageLoadError(f"{path}: не является PNG", path=path)
            while True:
                head = fh.read(8)
                if len(head) < 8:
                    raise ImageLoadError(f"{path}: truncated PNG", path=path)
                length, ctype = struct.unpack(">I4s", head)
                chunk_data = fh.read(length)
                fh.seek(4, os.SEEK_CUR)  # crc, already checked by the decoder

                if ctype == b"IHDR":
                    if length != 13:
                        raise ImageLoadError(f"{path}: bad IHDR length", path=path)
                    _width, _height, bit_depth, color_type = struct.unpack(">IIBB", chunk_data[:10])
                    ihdr = (bit_depth, color_type)
                elif ctype == b"PLTE":
                    palette_size = length // 3
                elif ctype == b"tRNS":
                    trns = chunk_data
                elif ctype in (b"IDAT", b"IEND"):
                    break
    except OSError as exc:
        raise ImageLoadError(f"{path}: {exc}", path=path) from exc

    if ihdr is None:
        raise ImageLoadError(f"{path}: IHDR chunk missing", path=path)
    bit_depth, color_type = ihdr

    if trns is not None:
        if color_type in (COLOR_GRAY_ALPHA, COLOR_RGBA):
            raise ImageLoadError(f"{path}: tRNS with alpha", path=path)
        if color_type == COLOR_PALETTE and len(trns) > palette_size:
            raise ImageLoadError(f"{path}: bad tRNS length", path=path)
        if color_type == COLOR_GRAY and len(trns) != 2:
            raise ImageLoadError(f"{path}: bad tRNS length", path=path)
        if color_type == COLOR_RGB and len(trns) != 6:
            raise ImageLoadError(f"{path}: bad tRNS length", path=path)

    return PngHeader(bit_depth=bit_depth, color_type=color_type, palette_size=palette_size, trns=trns)


class ImageService:
    def load_image(self, file_path: str | Path) -> ImageData:
        """Открывает и полностью декодирует PNG.

        Args:
            file_path: Путь до PNG-файла.

        Returns:
            `ImageData` c `PIL.Image.Image` в исходном режиме, размерами и заголовком PNG.

        Raises:
            ImageLoadError: файл не открывается, не является PNG или не декодируется.
        """
        path = Path(file_path)
        try:
            # formats: a JPEG named *.png must fail here, not decode
            with Image.open(path, formats=["PNG"]) as im:
                # load() pulls all pixel data, so the handle can close here
                im.load()
                pil_image = im.copy()
        except UnidentifiedImageError as exc:
            raise ImageLoadError(f"{path}: не является PNG", path=path) from exc
        except (OSError, SyntaxError, ValueError) as exc:
            raise ImageLoadError(f"{path}: {exc}", path=path) from exc

        header = read_png_header(path)
        width, height = pil_image.size
        logger.debug(
            "decoded %s (%dx%d, mode %s, depth %d)", path, width, height, pil_image.mode, header.bit_depth
        )
        return ImageData(
            path=path,
            pil_image=pil_image,
            width=width,
            height=height,
            mode=pil_image.mode,
            header=header,
        )

    def save_image(self, image: Image.Image, file_path: str | Path) -> Path:
        """Создаёт (или перезаписывает) файл и кодирует в него PNG.

        Raises:
            ImageSaveError: файл не создаётся или кодирование не удалось.
        """
        path = Path(file_path)
        try:
            with open(path, "wb") as fh:
                image.save(fh, format="PNG")
        except (OSError, ValueError) as exc:
            raise ImageSaveError(f"{path}: {exc}", path=path) from exc
        return path
