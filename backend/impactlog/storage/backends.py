"""The two media behind `WinsStore`, exposed through one capability interface.

A backend is chosen once per session. Both deliver full snapshots to the
store through `subscribe` and only after the medium has accepted a write, so
the store behaves the same way whichever medium is active. Medium I/O runs in
the threadpool so the event loop never waits on a file or a database.
"""
import logging
from abc import ABC, abstractmethod
from typing import Callable, Optional
from uuid import uuid4

from pydantic import TypeAdapter, ValidationError
from sqlalchemy.orm import sessionmaker
from starlette.concurrency import run_in_threadpool

from impactlog.core.constants import StorageKeys
from impactlog.core.identity import AccessLevel, Principal
from impactlog.core.time_utils import utcnow
from impactlog.storage.cloud import CloudStore, SnapshotHub, hub
from impactlog.storage.errors import LocalOnlyOperation, StorageWriteError
from impactlog.storage.local import FileMedium, LocalStorage, medium_path
from impactlog.schemas.profile import UserProfile
from impactlog.schemas.reflection import ReflectionCreate, WeeklyReflection
from impactlog.schemas.win import Win, WinCreate

logger = logging.getLogger(__name__)

Unsubscribe = Callable[[], None]

_wins_adapter = TypeAdapter(list[Win])
_reflections_adapter = TypeAdapter(list[WeeklyReflection])


class StoreBackend(ABC):
    """Capability interface shared by the local and cloud media."""

    persistence = "none"

    @abstractmethod
    async def subscribe(self, on_wins: Callable[[list[Win]], None],
                        on_reflections: Callable[[list[WeeklyReflection]], None]) -> Unsubscribe:
        """Deliver the current snapshots, then keep delivering after each write."""

    @abstractmethod
    async def add_win(self, data: WinCreate) -> Win:
        ...

    @abstractmethod
    async def update_win(self, win_id: str, changes: dict) -> Optional[Win]:
        ...

    @abstractmethod
    async def delete_win(self, win_id: str) -> None:
        ...

    @abstractmethod
    async def add_reflection(self, data: ReflectionCreate) -> WeeklyReflection:
        ...

    @abstractmethod
    async def load_profile(self) -> Optional[UserProfile]:
        ...

    @abstractmethod
    async def save_profile(self, profile: UserProfile) -> UserProfile:
        ...

    @abstractmethod
    async def clear(self) -> None:
        ...

    def is_available(self) -> bool:
        return True


class LocalBackend(StoreBackend):
    """Guest data in the per-principal local medium."""

    persistence = "local"

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self._wins: list[Win] = []
        self._reflections: list[WeeklyReflection] = []
        self._on_wins: Optional[Callable] = None
        self._on_reflections: Optional[Callable] = None

    async def _load(self, key: str, adapter: TypeAdapter) -> list:
        raw = await run_in_threadpool(self.storage.get, key)
        if raw is None:
            return []
        try:
            return adapter.validate_python(raw)
        except ValidationError:
            logger.exception("Stored %s could not be parsed; starting empty", key)
            return []

    @staticmethod
    def _dump(records: list) -> list[dict]:
        return [r.model_dump(mode="json", by_alias=True, exclude_none=True) for r in records]

    async def _persist(self, key: str, records: list) -> None:
        if not await run_in_threadpool(self.storage.set, key, self._dump(records)):
            raise StorageWriteError(key)

    async def subscribe(self, on_wins, on_reflections) -> Unsubscribe:
        # One read; later snapshots follow our own writes
        self._wins = await self._load(StorageKeys.WINS, _wins_adapter)
        self._reflections = await self._load(StorageKeys.REFLECTIONS, _reflections_adapter)
        self._on_wins = on_wins
        self._on_reflections = on_reflections
        on_wins(list(self._wins))
        on_reflections(list(self._reflections))

        def unsubscribe() -> None:
            self._on_wins = None
            self._on_reflections = None

        return unsubscribe

    async def _commit_wins(self, wins: list[Win]) -> None:
        await self._persist(StorageKeys.WINS, wins)
        self._wins = wins
        if self._on_wins:
            self._on_wins(list(wins))

    async def _commit_reflections(self, reflections: list[WeeklyReflection]) -> None:
        await self._persist(StorageKeys.REFLECTIONS, reflections)
        self._reflections = reflections
        if self._on_reflections:
            self._on_reflections(list(reflections))

    async def add_win(self, data: WinCreate) -> Win:
        now = utcnow()
        win = Win(
            **data.model_dump(),
            id=str(uuid4()),
            created_at=now,
            updated_at=now,
        )
        # newest first
        await self._commit_wins([win, *self._wins])
        return win

    async def update_win(self, win_id: str, changes: dict) -> Optional[Win]:
        current = next((w for w in self._wins if w.id == win_id), None)
        if current is None:
            return None
        merged = current.model_dump()
        merged.update({k: v for k, v in changes.items() if k not in ("id", "created_at")})
        merged["updated_at"] = utcnow()
        updated = Win.model_validate(merged)
        await self._commit_wins([updated if w.id == win_id else w for w in self._wins])
        return updated

    async def delete_win(self, win_id: str) -> None:
        if not any(w.id == win_id for w in self._wins):
            return
        await self._commit_wins([w for w in self._wins if w.id != win_id])

    async def add_reflection(self, data: ReflectionCreate) -> WeeklyReflection:
        reflection = WeeklyReflection(
            **data.model_dump(),
            id=str(uuid4()),
            created_at=utcnow(),
        )
        await self._commit_reflections([reflection, *self._reflections])
        return reflection

    async def load_profile(self) -> Optional[UserProfile]:
        raw = await run_in_threadpool(self.storage.get, StorageKeys.PROFILE)
        if raw is None:
            return None
        try:
            return UserProfile.model_validate(raw)
        except ValidationError:
            logger.exception("Stored profile could not be parsed; using defaults")
            return None

    async def save_profile(self, profile: UserProfile) -> UserProfile:
        payload = profile.model_dump(mode="json", by_alias=True)
        if not await run_in_threadpool(self.storage.set, StorageKeys.PROFILE, payload):
            raise StorageWriteError(StorageKeys.PROFILE)
        return profile

    async def clear(self) -> None:
        if not await run_in_threadpool(self.storage.clear_all):
            raise StorageWriteError("all keys")
        self._wins = []
        self._reflections = []
        if self._on_wins:
            self._on_wins([])
        if self._on_reflections:
            self._on_reflections([])

    def is_available(self) -> bool:
        return self.storage.is_available()


class CloudBackend(StoreBackend):
    """Privileged data in the database, fed back through live snapshots."""

    persistence = "cloud"

    def __init__(self, cloud: CloudStore):
        self.cloud = cloud

    async def subscribe(self, on_wins, on_reflections) -> Unsubscribe:
        stop_wins = await self.cloud.watch_wins(on_wins)
        stop_reflections = await self.cloud.watch_reflections(on_reflections)

        def unsubscribe() -> None:
            stop_wins()
            stop_reflections()

        return unsubscribe

    async def add_win(self, data: WinCreate) -> Win:
        return await self.cloud.add_win(data)

    async def update_win(self, win_id: str, changes: dict) -> Optional[Win]:
        return await self.cloud.update_win(win_id, changes)

    async def delete_win(self, win_id: str) -> None:
        await self.cloud.delete_win(win_id)

    async def add_reflection(self, data: ReflectionCreate) -> WeeklyReflection:
        return await self.cloud.add_reflection(data)

    async def load_profile(self) -> Optional[UserProfile]:
        return await self.cloud.get_profile()

    async def save_profile(self, profile: UserProfile) -> UserProfile:
        return await self.cloud.save_profile(profile)

    async def clear(self) -> None:
        raise LocalOnlyOperation("Cloud-synced data cannot be cleared from here")


class BackendFactory:
    """Picks the medium for a resolved session."""

    def __init__(self, session_factory: sessionmaker, local_root: str, snapshot_hub: SnapshotHub = hub):
        self.session_factory = session_factory
        self.local_root = local_root
        self.snapshot_hub = snapshot_hub

    def __call__(self, principal: Principal, level: AccessLevel) -> StoreBackend:
        if level is AccessLevel.privileged:
            return CloudBackend(CloudStore(self.session_factory, principal.uid, self.snapshot_hub))
        medium = FileMedium(medium_path(self.local_root, principal.uid))
        return LocalBackend(LocalStorage(medium))
