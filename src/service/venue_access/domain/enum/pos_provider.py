from enum import StrEnum


class PosProvider(StrEnum):
    SQUARE = 'square'
    TOAST = 'toast'
