from datetime import datetime, timedelta
from typing import Any, Iterable, Mapping, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import attrs

from src.platform.exception.exceptions import DomainError
from src.service.venue_access.domain.entity.pos_transaction_entity import PosTransaction
from src.service.venue_access.domain.enum.access_tier import AccessLevel, AccessTier
from src.service.venue_access.domain.value_object.live_window import LiveWindow


def _validate_timezone(instance: object, attribute: attrs.Attribute, value: str) -> None:
    try:
        ZoneInfo(value)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise DomainError(f'Unknown timezone {value!r}') from e


EDITABLE_FIELDS = (
    'name',
    'threshold',
    'tier',
    'access_level',
    'description',
    'window_days',
    'live_window_start',
    'live_window_end',
    'timezone',
    'priority',
)
_REQUIRED_FIELDS = frozenset({'name', 'threshold', 'tier', 'access_level', 'timezone', 'priority'})


@attrs.define
class SpendRule:
    venue_id: int
    name: str
    threshold: int  # minor units
    tier: AccessTier
    access_level: AccessLevel
    description: Optional[str] = None
    window_days: Optional[int] = None
    live_window_start: Optional[str] = None  # "HH:MM", venue-local
    live_window_end: Optional[str] = None
    timezone: str = attrs.field(default='UTC', validator=_validate_timezone)
    priority: int = 0
    is_active: bool = True
    times_triggered: int = 0
    last_triggered_at: Optional[datetime] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @classmethod
    def create(
        cls,
        *,
        venue_id: int,
        name: str,
        threshold: int,
        tier: AccessTier,
        access_level: AccessLevel,
        description: Optional[str] = None,
        window_days: Optional[int] = None,
        live_window_start: Optional[str] = None,
        live_window_end: Optional[str] = None,
        timezone: str = 'UTC',
        priority: int = 0,
    ) -> 'SpendRule':
        if not name or not name.strip():
            raise DomainError('Rule name cannot be empty')
        if threshold <= 0:
            raise DomainError('Threshold must be greater than 0')
        if window_days is not None and window_days <= 0:
            raise DomainError('window_days must be positive')
        # Validates format and the both-or-neither rule
        LiveWindow.parse(start=live_window_start, end=live_window_end)

        return cls(
            venue_id=venue_id,
            name=name.strip(),
            threshold=threshold,
            tier=tier,
            access_level=access_level,
            description=description,
            window_days=window_days,
            live_window_start=live_window_start,
            live_window_end=live_window_end,
            timezone=timezone,
            priority=priority,
        )

    def revise(self, changes: Mapping[str, Any]) -> 'SpendRule':
        """
        Apply a partial edit, validated exactly like a new rule.

        Trigger statistics, activity and grants already made are kept.
        """
        unknown = set(changes) - set(EDITABLE_FIELDS)
        if unknown:
            raise DomainError(f'Spend rule fields cannot be changed: {sorted(unknown)}')
        cleared = [name for name in _REQUIRED_FIELDS if name in changes and changes[name] is None]
        if cleared:
            raise DomainError(f'Spend rule fields cannot be empty: {sorted(cleared)}')

        fields = {name: getattr(self, name) for name in EDITABLE_FIELDS}
        fields.update(changes)
        draft = SpendRule.create(venue_id=self.venue_id, **fields)
        return attrs.evolve(self, **{name: getattr(draft, name) for name in EDITABLE_FIELDS})

    @property
    def live_window(self) -> Optional[LiveWindow]:
        return LiveWindow.parse(start=self.live_window_start, end=self.live_window_end)

    def window_start(self, *, now: datetime) -> Optional[datetime]:
        if self.window_days is None:
            return None
        return now - timedelta(days=self.window_days)

    def counts(self, transaction: PosTransaction, *, now: datetime) -> bool:
        if not transaction.counts_toward_spend or transaction.venue_id != self.venue_id:
            return False

        since = self.window_start(now=now)
        if since is not None and transaction.occurred_at < since:
            return False

        window = self.live_window
        if window is not None:
            local = transaction.occurred_at.astimezone(ZoneInfo(self.timezone))
            return window.contains(local.time())
        return True

    def qualifying_spend(self, transactions: Iterable[PosTransaction], *, now: datetime) -> int:
        return sum(t.amount for t in transactions if self.counts(t, now=now))

    def is_crossed_by(self, transactions: Iterable[PosTransaction], *, now: datetime) -> bool:
        return self.qualifying_spend(transactions, now=now) >= self.threshold
