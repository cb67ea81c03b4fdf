from enum import StrEnum


class AccessTier(StrEnum):
    GUEST = 'guest'
    REGULAR = 'regular'
    PLATINUM = 'platinum'
    WHALE = 'whale'


class AccessLevel(StrEnum):
    PUBLIC_LOBBY = 'public_lobby'
    INNER_CIRCLE = 'inner_circle'
