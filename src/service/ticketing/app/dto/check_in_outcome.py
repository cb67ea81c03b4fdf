"""
Check-in outcomes.

A rejection carries the conflicting state so the door can say
"already checked in at 22:14 by staff 7" instead of a bare "invalid".
"""

from typing import Any, Optional

import attrs

from src.service.ticketing.domain.entity.check_in_record_entity import CheckInRecord
from src.service.ticketing.domain.enum.rejection_reason import (
    CheckInRejectReason,
    GuestCheckInRejectReason,
)


@attrs.define(frozen=True)
class CheckedIn:
    record: CheckInRecord


@attrs.define(frozen=True)
class CheckInRejected:
    reason: CheckInRejectReason
    existing_record: Optional[CheckInRecord] = None
    context: dict[str, Any] = attrs.field(factory=dict)

    @property
    def message(self) -> str:
        if self.existing_record is not None:
            return self.existing_record.describe()
        return self.reason.value


@attrs.define(frozen=True)
class GuestCheckInRejected:
    reason: GuestCheckInRejectReason
    existing_record: Optional[CheckInRecord] = None
    context: dict[str, Any] = attrs.field(factory=dict)

    @property
    def message(self) -> str:
        if self.existing_record is not None:
            return self.existing_record.describe()
        return self.reason.value


CheckInOutcome = CheckedIn | CheckInRejected
GuestCheckInOutcome = CheckedIn | GuestCheckInRejected
