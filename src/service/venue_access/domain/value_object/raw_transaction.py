"""
RawTransaction

The strict shape every provider payload is normalized into before it reaches
the ingestor. Anything that does not fit raises PosPayloadError at the
adapter boundary instead of leaking half-parsed data into storage.
"""

from datetime import datetime
from typing import Optional

import attrs

from src.platform.exception.exceptions import PosPayloadError
from src.service.venue_access.domain.enum.pos_transaction_status import PosTransactionStatus


def _validate_txn_id(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not isinstance(value, str) or not value.strip():
        raise PosPayloadError('provider_txn_id is required')


def _validate_amount(instance: object, attribute: attrs.Attribute, value: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool) or value < 0:
        raise PosPayloadError(
            f'amount must be a non-negative integer of minor units, got {value!r}'
        )


def _validate_currency(instance: object, attribute: attrs.Attribute, value: str) -> None:
    if not isinstance(value, str) or len(value) != 3 or not value.isalpha():
        raise PosPayloadError(f'currency must be an ISO 4217 code, got {value!r}')


def _validate_aware(instance: object, attribute: attrs.Attribute, value: datetime) -> None:
    if not isinstance(value, datetime) or value.tzinfo is None:
        raise PosPayloadError('occurred_at must be a timezone-aware datetime')


def _upper(value: object) -> object:
    return value.upper() if isinstance(value, str) else value


@attrs.define(frozen=True)
class RawTransaction:
    provider_txn_id: str = attrs.field(validator=_validate_txn_id)
    amount: int = attrs.field(validator=_validate_amount)  # minor units
    currency: str = attrs.field(converter=_upper, validator=_validate_currency)
    status: PosTransactionStatus
    occurred_at: datetime = attrs.field(validator=_validate_aware)
    card_token: Optional[str] = attrs.field(default=None, repr=False)
