"""Small readers shared by the provider normalizers; every failure is a PosPayloadError."""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping, Optional

from pydantic import AwareDatetime, TypeAdapter, ValidationError

from src.platform.exception.exceptions import PosPayloadError


_aware_datetime = TypeAdapter(AwareDatetime)


def dig(payload: Mapping[str, Any], *path: str) -> Any:
    """``dig(p, 'a', 'b')`` is ``p['a']['b']``, or None as soon as a level is missing."""
    current: Any = payload
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def require(payload: Mapping[str, Any], *path: str) -> Any:
    value = dig(payload, *path)
    if value is None or value == '':
        raise PosPayloadError(f'{".".join(path)} is required')
    return value


def parse_timestamp(value: Any, *, field: str) -> datetime:
    try:
        return _aware_datetime.validate_python(value)
    except ValidationError as e:
        raise PosPayloadError(f'{field} is not a timezone-aware timestamp: {value!r}') from e


def minor_units_from_int(value: Any, *, field: str) -> int:
    """Provider already reports cents (Square sends them as int or numeric string)."""
    if isinstance(value, bool):
        raise PosPayloadError(f'{field} must be an integer amount, got {value!r}')
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip('-').isdigit():
        return int(value)
    raise PosPayloadError(f'{field} must be an integer amount, got {value!r}')


def minor_units_from_decimal(value: Any, *, field: str) -> int:
    """Provider reports major units (Toast sends 12.5 for $12.50)."""
    if isinstance(value, bool) or not isinstance(value, (int, float, str)):
        raise PosPayloadError(f'{field} must be a decimal amount, got {value!r}')
    try:
        amount = Decimal(str(value))
    except InvalidOperation as e:
        raise PosPayloadError(f'{field} must be a decimal amount, got {value!r}') from e
    if not amount.is_finite():
        raise PosPayloadError(f'{field} must be a decimal amount, got {value!r}')
    return int((amount * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def optional_str(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None
