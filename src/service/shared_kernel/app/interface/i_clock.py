from abc import ABC, abstractmethod
from datetime import datetime


class IClock(ABC):
    """Venue-canonical time. Sales windows and holds never trust client timestamps."""

    @abstractmethod
    def now(self) -> datetime:
        """Timezone-aware UTC now"""
        pass
