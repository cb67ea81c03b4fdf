from abc import ABC, abstractmethod
from typing import Optional

from src.service.ticketing.domain.entity.check_in_record_entity import CheckInRecord


class ICheckInRepo(ABC):
    """
    Owns Ticket.status → REDEEMED, guest entry → CHECKED_IN and CheckInRecord creation.

    The status guard and the record insert commit as one unit; a caller that
    gets None lost the race and must report the conflict, not retry.
    """

    @abstractmethod
    async def redeem_ticket(self, *, record: CheckInRecord) -> Optional[CheckInRecord]:
        """ACTIVE → REDEEMED for ``record.ticket_id`` plus the record insert."""
        pass

    @abstractmethod
    async def check_in_guest(self, *, record: CheckInRecord) -> Optional[CheckInRecord]:
        """PENDING/CONFIRMED → CHECKED_IN for the record's guest entry, plus the record insert."""
        pass

    @abstractmethod
    async def get_by_ticket_id(self, *, ticket_id: int) -> Optional[CheckInRecord]:
        pass

    @abstractmethod
    async def get_by_guest_list_entry_id(
        self, *, guest_list_entry_id: int
    ) -> Optional[CheckInRecord]:
        pass
