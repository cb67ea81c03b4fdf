"""
Toast payments → RawTransaction.

Toast nests payments under orders → checks → payments; the fetcher and the
webhook both hand over one payment object, optionally carrying the check's
``closedDate`` and the order's ``createdDate``. Amounts are in major units.
Toast exposes no card fingerprint, so the token is the ``cardToken`` the
venue's Toast integration attaches to the payment.
"""

from typing import Any, Mapping

from src.platform.exception.exceptions import PosPayloadError
from src.service.venue_access.app.interface.i_pos_payload_normalizer import IPosPayloadNormalizer
from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.enum.pos_transaction_status import PosTransactionStatus
from src.service.venue_access.domain.value_object.raw_transaction import RawTransaction
from src.service.venue_access.driven_adapter.pos.payload_parsing import (
    dig,
    minor_units_from_decimal,
    optional_str,
    parse_timestamp,
    require,
)


_DEFAULT_CURRENCY = 'USD'


class ToastPayloadNormalizer(IPosPayloadNormalizer):
    provider = PosProvider.TOAST

    def normalize(self, payload: Mapping[str, Any]) -> RawTransaction:
        if not isinstance(payload, Mapping):
            raise PosPayloadError('Toast payload must be a JSON object')
        payment = dig(payload, 'payment') or payload
        if not isinstance(payment, Mapping):
            raise PosPayloadError('payment must be a JSON object')

        refund_status = payment.get('refundStatus') or 'NONE'
        if payment.get('paymentStatus') in ('VOIDED', 'DENIED'):
            status = PosTransactionStatus.FAILED
        elif refund_status == 'NONE':
            status = PosTransactionStatus.COMPLETED
        else:
            status = PosTransactionStatus.REFUNDED

        occurred = (
            payment.get('paidDate') or payment.get('closedDate') or payment.get('createdDate')
        )
        if occurred is None:
            raise PosPayloadError('paidDate, closedDate or createdDate is required')

        return RawTransaction(
            provider_txn_id=str(require(payment, 'guid')),
            amount=minor_units_from_decimal(require(payment, 'amount'), field='amount'),
            currency=payment.get('currency') or _DEFAULT_CURRENCY,
            status=status,
            occurred_at=parse_timestamp(occurred, field='paidDate'),
            card_token=optional_str(payment.get('cardToken')),
        )
