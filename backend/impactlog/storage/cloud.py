"""Cloud medium for the privileged account.

Documents live in SQL tables scoped by `user_id`. Reads are exposed as live
subscriptions: a listener receives the complete, ordered result set when it
subscribes and again after every committed write for the same user, no
matter which `CloudStore` instance performed it.

Session work runs in the threadpool; snapshots are published from the event
loop once the query returns.
"""
import logging
from collections import defaultdict
from contextlib import contextmanager
from datetime import date
from typing import Callable, Optional

from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.sql import func
from starlette.concurrency import run_in_threadpool

from impactlog.core.constants import (
    PROFILES_COLLECTION,
    REFLECTIONS_COLLECTION,
    WINS_COLLECTION,
)
from impactlog.models.profile import ProfileRecord
from impactlog.models.reflection import ReflectionRecord
from impactlog.models.win import WinRecord
from impactlog.schemas.profile import UserProfile
from impactlog.schemas.reflection import ReflectionCreate, WeeklyReflection
from impactlog.schemas.win import Win, WinCreate

logger = logging.getLogger(__name__)

Listener = Callable[[list], None]


class SnapshotHub:
    """In-process fan-out of full snapshots keyed by (collection, user id)."""

    def __init__(self):
        self._listeners: dict[tuple[str, str], list[Listener]] = defaultdict(list)

    def listen(self, collection: str, user_id: str, listener: Listener) -> Callable[[], None]:
        key = (collection, user_id)
        self._listeners[key].append(listener)

        def unsubscribe() -> None:
            listeners = self._listeners.get(key)
            if listeners and listener in listeners:
                listeners.remove(listener)
                if not listeners:
                    del self._listeners[key]

        return unsubscribe

    def has_listeners(self, collection: str, user_id: str) -> bool:
        return bool(self._listeners.get((collection, user_id)))

    def publish(self, collection: str, user_id: str, snapshot: list) -> None:
        # copy: a listener may unsubscribe while being notified
        for listener in list(self._listeners.get((collection, user_id), [])):
            listener(snapshot)


# Shared by every request in this process
hub = SnapshotHub()


def win_from_record(row: WinRecord) -> Win:
    return Win(
        id=row.id,
        date=row.date,
        category=row.category,
        situation=row.situation,
        action=row.action,
        impact=row.impact,
        impact_type=row.impact_type,
        impact_level=row.impact_level,
        evidence=row.evidence,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def reflection_from_record(row: ReflectionRecord) -> WeeklyReflection:
    return WeeklyReflection(
        id=row.id,
        week_start_date=row.week_start_date,
        went_well=row.went_well,
        unblocked=row.unblocked,
        proud_of=row.proud_of,
        focused_on=row.focused_on,
        contributed=row.contributed,
        impact=row.impact,
        learned=row.learned,
        carry_forward=row.carry_forward,
        created_at=row.created_at,
    )


class CloudStore:
    def __init__(self, session_factory: sessionmaker, user_id: str, snapshot_hub: SnapshotHub = hub):
        self.session_factory = session_factory
        self.user_id = user_id
        self.hub = snapshot_hub

    @contextmanager
    def _session(self):
        db: Session = self.session_factory()
        try:
            yield db
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # --------- Queries --------- #

    def _query_wins(self) -> list[Win]:
        with self._session() as db:
            rows = (
                db.query(WinRecord)
                .filter(WinRecord.user_id == self.user_id)
                .order_by(WinRecord.date.desc(), WinRecord.created_at.desc())
                .all()
            )
            return [win_from_record(r) for r in rows]

    def _query_reflections(self) -> list[WeeklyReflection]:
        with self._session() as db:
            rows = (
                db.query(ReflectionRecord)
                .filter(ReflectionRecord.user_id == self.user_id)
                .order_by(ReflectionRecord.week_start_date.desc(), ReflectionRecord.created_at.desc())
                .all()
            )
            return [reflection_from_record(r) for r in rows]

    # --------- Subscriptions --------- #

    async def _watch(self, collection: str, query: Callable[[], list], callback: Listener) -> Callable[[], None]:
        unsubscribe = self.hub.listen(collection, self.user_id, callback)
        try:
            snapshot = await run_in_threadpool(query)
        except Exception:
            logger.exception("Initial %s snapshot failed for user %s", collection, self.user_id)
            return unsubscribe
        callback(snapshot)
        return unsubscribe

    async def watch_wins(self, callback: Listener) -> Callable[[], None]:
        return await self._watch(WINS_COLLECTION, self._query_wins, callback)

    async def watch_reflections(self, callback: Listener) -> Callable[[], None]:
        return await self._watch(REFLECTIONS_COLLECTION, self._query_reflections, callback)

    async def _broadcast(self, collection: str) -> None:
        if not self.hub.has_listeners(collection, self.user_id):
            return
        query = self._query_wins if collection == WINS_COLLECTION else self._query_reflections
        try:
            snapshot = await run_in_threadpool(query)
        except Exception:
            # the write itself succeeded; listeners catch up on the next change
            logger.exception("Failed to refresh %s snapshot for user %s", collection, self.user_id)
            return
        self.hub.publish(collection, self.user_id, snapshot)

    # --------- Writes --------- #

    def _add_win_sync(self, data: WinCreate) -> Win:
        with self._session() as db:
            row = WinRecord(
                user_id=self.user_id,
                date=data.date,
                category=data.category.value,
                situation=data.situation,
                action=data.action,
                impact=data.impact,
                impact_type=data.impact_type.value,
                impact_level=data.impact_level.value,
                evidence=data.evidence,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return win_from_record(row)

    async def add_win(self, data: WinCreate) -> Win:
        win = await run_in_threadpool(self._add_win_sync, data)
        await self._broadcast(WINS_COLLECTION)
        return win

    def _update_win_sync(self, win_id: str, changes: dict) -> Optional[Win]:
        with self._session() as db:
            row = (
                db.query(WinRecord)
                .filter(WinRecord.id == win_id, WinRecord.user_id == self.user_id)
                .first()
            )
            if not row:
                return None
            for key, value in changes.items():
                if key in ("id", "user_id", "created_at", "updated_at"):
                    continue
                setattr(row, key, value)
            row.updated_at = func.now()
            db.commit()
            db.refresh(row)
            return win_from_record(row)

    async def update_win(self, win_id: str, changes: dict) -> Optional[Win]:
        changes = dict(changes)
        # Normalize types for known fields
        if "date" in changes and isinstance(changes["date"], str):
            changes["date"] = date.fromisoformat(changes["date"])
        for key in ("category", "impact_type", "impact_level"):
            if hasattr(changes.get(key), "value"):
                changes[key] = changes[key].value

        win = await run_in_threadpool(self._update_win_sync, win_id, changes)
        if win is not None:
            await self._broadcast(WINS_COLLECTION)
        return win

    def _delete_win_sync(self, win_id: str) -> int:
        with self._session() as db:
            deleted = (
                db.query(WinRecord)
                .filter(WinRecord.id == win_id, WinRecord.user_id == self.user_id)
                .delete()
            )
            db.commit()
            return deleted

    async def delete_win(self, win_id: str) -> None:
        if await run_in_threadpool(self._delete_win_sync, win_id):
            await self._broadcast(WINS_COLLECTION)

    def _add_reflection_sync(self, data: ReflectionCreate) -> WeeklyReflection:
        with self._session() as db:
            row = ReflectionRecord(
                user_id=self.user_id,
                week_start_date=data.week_start_date,
                went_well=data.went_well,
                unblocked=data.unblocked,
                proud_of=data.proud_of,
                focused_on=data.focused_on,
                contributed=data.contributed,
                impact=data.impact,
                learned=data.learned,
                carry_forward=data.carry_forward,
            )
            db.add(row)
            db.commit()
            db.refresh(row)
            return reflection_from_record(row)

    async def add_reflection(self, data: ReflectionCreate) -> WeeklyReflection:
        reflection = await run_in_threadpool(self._add_reflection_sync, data)
        await self._broadcast(REFLECTIONS_COLLECTION)
        return reflection

    # --------- Profile (plain reads, no subscription) --------- #

    def _get_profile_sync(self) -> Optional[UserProfile]:
        with self._session() as db:
            row = db.query(ProfileRecord).filter(ProfileRecord.user_id == self.user_id).first()
            if not row:
                return None
            return UserProfile(
                display_name=row.display_name,
                email=row.email,
                role=row.role or UserProfile.model_fields["role"].default,
                bio=row.bio or UserProfile.model_fields["bio"].default,
                status=row.status or UserProfile.model_fields["status"].default,
                photo_url=row.photo_url,
                updated_at=row.updated_at,
            )

    async def get_profile(self) -> Optional[UserProfile]:
        return await run_in_threadpool(self._get_profile_sync)

    def _save_profile_sync(self, profile: UserProfile) -> None:
        with self._session() as db:
            row = db.query(ProfileRecord).filter(ProfileRecord.user_id == self.user_id).first()
            if not row:
                row = ProfileRecord(user_id=self.user_id)
                db.add(row)
            row.display_name = profile.display_name
            row.email = profile.email
            row.role = profile.role
            row.bio = profile.bio
            row.status = profile.status.value
            row.photo_url = profile.photo_url
            row.updated_at = func.now()
            db.commit()

    async def save_profile(self, profile: UserProfile) -> UserProfile:
        """Create or merge the user's profile document."""
        await run_in_threadpool(self._save_profile_sync, profile)
        logger.info("Saved %s document for user %s", PROFILES_COLLECTION, self.user_id)
        return await self.get_profile()
