from abc import ABC, abstractmethod
from typing import Any, Mapping

from src.service.venue_access.domain.enum.pos_provider import PosProvider
from src.service.venue_access.domain.value_object.raw_transaction import RawTransaction


class IPosPayloadNormalizer(ABC):
    provider: PosProvider

    @abstractmethod
    def normalize(self, payload: Mapping[str, Any]) -> RawTransaction:
        """Raises PosPayloadError when the payload cannot be trusted."""
        pass
