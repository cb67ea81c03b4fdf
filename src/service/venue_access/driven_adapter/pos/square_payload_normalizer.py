"""
Square payments → RawTransaction.

Accepts either a bare Payment object (ListPayments) or the ``payment.*``
webhook envelope (``data.object.payment``). The card fingerprint is the
token: it is stable per card across merchants' locations.
"""

from typing import Any, Mapping

from src.platform.exception.exceptions import PosPayloadError
from src.service.venue_access.app.interface.i_pos_payload_normalizer import IPosPayloadNormalizer
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.pos_transaction_status import PosTransactionStatus
from src.service.venue_access.domain.value_object.raw_transaction import RawTransaction
from src.service.venue_access.driven_adapter.pos.payload_parsing import (
    dig,
    minor_units_from_int,
    optional_str,
    parse_timestamp,
    require,
)


_STATUS_MAP = {
    'COMPLETED': PosTransactionStatus.COMPLETED,
    'APPROVED': PosTransactionStatus.PENDING,
    'PENDING': PosTransactionStatus.PENDING,
    'CANCELED': PosTransactionStatus.FAILED,
    'FAILED': PosTransactionStatus.FAILED,
}


class SquarePayloadNormalizer(IPosPayloadNormalizer):
    provider = PosProvider.SQUARE

    def normalize(self, payload: Mapping[str, Any]) -> RawTransaction:
        if not isinstance(payload, Mapping):
            raise PosPayloadError('Square payload must be a JSON object')
        payment = dig(payload, 'data', 'object', 'payment') or payload
        if not isinstance(payment, Mapping):
            raise PosPayloadError('data.object.payment must be a JSON object')

        status_name = require(payment, 'status')
        status = _STATUS_MAP.get(str(status_name).upper())
        if status is None:
            raise PosPayloadError(f'Unknown Square payment status {status_name!r}')

        refunded = dig(payment, 'refunded_money', 'amount')
        if refunded is not None and minor_units_from_int(refunded, field='refunded_money') > 0:
            status = PosTransactionStatus.REFUNDED

        return RawTransaction(
            provider_txn_id=str(require(payment, 'id')),
            amount=minor_units_from_int(
                require(payment, 'amount_money', 'amount'), field='amount_money.amount'
            ),
            currency=require(payment, 'amount_money', 'currency'),
            status=status,
            occurred_at=parse_timestamp(require(payment, 'created_at'), field='created_at'),
            card_token=optional_str(dig(payment, 'card_details', 'card', 'fingerprint')),
        )
