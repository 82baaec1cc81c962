"""Фиксированные параметры перекраски.

Конфигурации во время выполнения нет: ни флагов, ни переменных окружения.
"""

PNG_EXTENSION = ".png"
OUTPUT_SUFFIX = "-blue.png"
PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"

# cyan; alpha always comes from the source pixel
TARGET_RGB = (0, 255, 255)

# Глубина, при которой пиксели декодируются как неумноженный 8-битный RGBA.
NRGBA_MAX_DEPTH = 8

MSG_ONLY_PNG = "only PNGs allowed"
MSG_ONLY_NRGBA = "Only NRGBA colors supported"

FATAL_EXIT_CODE = 1
