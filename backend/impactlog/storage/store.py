"""Wins and reflections for one signed-in session.

`WinsStore` hides which medium is active. The flow per session is:

    uninitialized --open()--> loading --+--> cloud_synced  (privileged)
                                        +--> local_loaded  (standard)
                                        +--> empty         (no principal)
    any state --close()--> empty

Memory is only replaced by snapshots the backend delivers after the medium
accepted a write. Statistics are recomputed from memory on every call.
"""
import asyncio
import logging
from datetime import date, timedelta
from enum import Enum
from typing import Callable, Optional, Union

from impactlog.core.identity import AccessLevel, AccessPolicy, Principal
from impactlog.core.time_utils import (
    end_of_month,
    end_of_week,
    start_of_month,
    start_of_week,
    utcnow,
    within,
)
from impactlog.schemas.profile import ProfileUpdate, UserProfile
from impactlog.schemas.reflection import ReflectionCreate, WeeklyReflection
from impactlog.schemas.win import Win, WinCreate, WinUpdate
from impactlog.storage.backends import StoreBackend
from impactlog.storage.errors import NotSignedIn

logger = logging.getLogger(__name__)

BackendSelector = Callable[[Principal, AccessLevel], StoreBackend]


class StoreState(str, Enum):
    uninitialized = "uninitialized"
    loading = "loading"
    cloud_synced = "cloud_synced"
    local_loaded = "local_loaded"
    empty = "empty"


class WinsStore:
    def __init__(
        self,
        policy: AccessPolicy,
        select_backend: BackendSelector,
        week_starts_on: int = 0,
        snapshot_timeout: float = 5.0,
    ):
        self.policy = policy
        self.select_backend = select_backend
        self.week_starts_on = week_starts_on
        self.snapshot_timeout = snapshot_timeout

        self.state = StoreState.uninitialized
        self.principal: Optional[Principal] = None
        self.access_level = AccessLevel.unauthenticated
        self.backend: Optional[StoreBackend] = None
        self._unsubscribe: Optional[Callable[[], None]] = None
        self._wins: list[Win] = []
        self._reflections: list[WeeklyReflection] = []
        self._first_snapshot: Optional[asyncio.Event] = None

    # --------- Lifecycle --------- #

    @property
    def wins(self) -> list[Win]:
        return list(self._wins)

    @property
    def reflections(self) -> list[WeeklyReflection]:
        return list(self._reflections)

    @property
    def is_loading(self) -> bool:
        return self.state in (StoreState.uninitialized, StoreState.loading)

    @property
    def is_guest(self) -> bool:
        return self.access_level is AccessLevel.standard

    @property
    def persistence(self) -> str:
        return self.backend.persistence if self.backend else "none"

    def _receive_wins(self, snapshot: list[Win]) -> None:
        self._wins = list(snapshot)
        if self._first_snapshot is not None:
            self._first_snapshot.set()

    def _receive_reflections(self, snapshot: list[WeeklyReflection]) -> None:
        self._reflections = list(snapshot)

    async def open(self, principal: Optional[Principal]) -> StoreState:
        """Bind the store to a principal (or to nobody) and load its data."""
        if self.state not in (StoreState.uninitialized, StoreState.empty):
            self.close()

        self.principal = principal
        self.access_level = self.policy.resolve(principal)
        if self.access_level is AccessLevel.unauthenticated:
            self._reset()
            return self.state

        self.state = StoreState.loading
        self.backend = self.select_backend(principal, self.access_level)
        self._first_snapshot = asyncio.Event()
        self._unsubscribe = await self.backend.subscribe(self._receive_wins, self._receive_reflections)

        if self.access_level is AccessLevel.privileged:
            try:
                await asyncio.wait_for(self._first_snapshot.wait(), timeout=self.snapshot_timeout)
            except asyncio.TimeoutError:
                logger.warning(
                    "No cloud snapshot for user %s within %.1fs; showing an empty set",
                    principal.uid,
                    self.snapshot_timeout,
                )
            self.state = StoreState.cloud_synced
        else:
            self.state = StoreState.local_loaded
        return self.state

    def close(self) -> None:
        """Tear down subscriptions (logout or unmount)."""
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._reset()

    def _reset(self) -> None:
        self._unsubscribe = None
        self.backend = None
        self._first_snapshot = None
        self._wins = []
        self._reflections = []
        self.state = StoreState.empty

    def _require_backend(self) -> StoreBackend:
        if self.backend is None or self.state is StoreState.empty:
            raise NotSignedIn("Sign in to record wins and reflections")
        return self.backend

    # --------- Mutations --------- #

    async def add_win(self, data: WinCreate) -> Win:
        backend = self._require_backend()
        try:
            return await backend.add_win(data)
        except Exception:
            logger.exception("Failed to add win")
            raise

    async def update_win(self, win_id: str, changes: Union[WinUpdate, dict]) -> Optional[Win]:
        backend = self._require_backend()
        if isinstance(changes, WinUpdate):
            changes = changes.model_dump(exclude_unset=True)
        try:
            return await backend.update_win(win_id, changes)
        except Exception:
            logger.exception("Failed to update win %s", win_id)
            raise

    async def delete_win(self, win_id: str) -> None:
        backend = self._require_backend()
        try:
            await backend.delete_win(win_id)
        except Exception:
            logger.exception("Failed to delete win %s", win_id)
            raise

    async def add_reflection(self, data: ReflectionCreate) -> WeeklyReflection:
        backend = self._require_backend()
        if data.week_start_date is None:
            data = data.model_copy(
                update={"week_start_date": start_of_week(date.today(), self.week_starts_on)}
            )
        try:
            return await backend.add_reflection(data)
        except Exception:
            logger.exception("Failed to add reflection")
            raise

    # --------- Profile --------- #

    def _default_profile(self) -> UserProfile:
        principal = self.principal
        return UserProfile(
            display_name=(principal.display_name or "") if principal else "",
            email=(principal.email or "") if principal else "",
        )

    async def get_profile(self) -> UserProfile:
        backend = self._require_backend()
        try:
            stored = await backend.load_profile()
        except Exception:
            logger.exception("Error fetching profile")
            stored = None
        if stored is None:
            return self._default_profile()
        # email always follows the signed-in principal
        return stored.model_copy(update={"email": self.principal.email or ""})

    async def update_profile(self, changes: Union[ProfileUpdate, dict]) -> UserProfile:
        backend = self._require_backend()
        if isinstance(changes, ProfileUpdate):
            changes = changes.model_dump(exclude_unset=True)
        current = await self.get_profile()
        updated = UserProfile.model_validate(
            {
                **current.model_dump(),
                **changes,
                "email": self.principal.email or "",
                "updated_at": utcnow(),
            }
        )
        try:
            return await backend.save_profile(updated)
        except Exception:
            logger.exception("Failed to save profile")
            raise

    async def clear_local_data(self) -> None:
        """Wipe every local key of a guest session."""
        backend = self._require_backend()
        await backend.clear()

    def storage_available(self) -> bool:
        return self.backend.is_available() if self.backend else False

    # --------- Lookups & statistics --------- #

    def get_win(self, win_id: str) -> Optional[Win]:
        return next((w for w in self._wins if w.id == win_id), None)

    def reflection_for_week(self, week_start: date) -> Optional[WeeklyReflection]:
        return next((r for r in self._reflections if r.week_start_date == week_start), None)

    def _count_between(self, start: date, end: date) -> int:
        return sum(1 for w in self._wins if within(w.date, start, end))

    def wins_this_week(self, today: Optional[date] = None) -> int:
        today = today or date.today()
        return self._count_between(
            start_of_week(today, self.week_starts_on),
            end_of_week(today, self.week_starts_on),
        )

    def wins_this_month(self, today: Optional[date] = None) -> int:
        today = today or date.today()
        return self._count_between(start_of_month(today), end_of_month(today))

    def categories_covered(self, today: Optional[date] = None) -> int:
        today = today or date.today()
        start, end = start_of_month(today), end_of_month(today)
        return len({w.category for w in self._wins if within(w.date, start, end)})

    def wins_in_range(self, start: Optional[date] = None, end: Optional[date] = None) -> list[Win]:
        """Wins dated within [start, end], most recent first."""
        matching = [w for w in self._wins if within(w.date, start, end)]
        return sorted(matching, key=lambda w: w.date, reverse=True)

    def weekly_counts(self, weeks: int = 12, today: Optional[date] = None) -> list[tuple[date, int]]:
        """
        Win counts for the last `weeks` weeks including the current one,
        oldest first. Weeks without wins appear with 0.
        """
        today = today or date.today()
        first = start_of_week(today, self.week_starts_on) - timedelta(weeks=weeks - 1)
        counts: dict[date, int] = {}
        for w in self._wins:
            if w.date >= first:
                week = start_of_week(w.date, self.week_starts_on)
                counts[week] = counts.get(week, 0) + 1
        return [
            (first + timedelta(weeks=i), counts.get(first + timedelta(weeks=i), 0))
            for i in range(weeks)
        ]
