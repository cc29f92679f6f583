"""Reconciliation between the local store and a remote store.

Whole collections move in both directions and the last writer wins. There is
no per-record merge, so two devices editing the same collection between
syncs will lose one side's changes.
"""

import asyncio
from contextlib import AsyncExitStack, asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Awaitable, Callable, TypeVar

import aiosqlite
import structlog

from ..config import SyncConfig
from ..errors import MALFORMED_DATA_ERRORS, RemoteStoreError, SyncError
from ..models.profile import UserProfile
from ..models.sessions import MeasurementSession, WorkoutSession
from ..models.templates import CustomWorkout
from ..store.local import (
    COLLECTIONS,
    CUSTOM_WORKOUTS,
    MEASUREMENT_SESSIONS,
    PROFILE,
    WORKOUT_SESSIONS,
    LocalStore,
)
from ..store.remote import RemoteStore
from .events import EventBus

logger = structlog.get_logger(__name__)

T = TypeVar("T")

SyncCallback = Callable[[bool, str | None], None]
PullHook = Callable[[], Awaitable[None]]

LOCK_ORDER = (*COLLECTIONS, PROFILE)


class SyncStatus(str, Enum):
    IDLE = "idle"
    SYNCING = "syncing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass
class SyncState:
    """Observable outcome of the most recent sync."""

    status: SyncStatus = SyncStatus.IDLE
    last_error: str | None = None
    last_synced_at: datetime | None = None
    in_flight: int = 0

    @property
    def is_syncing(self) -> bool:
        return self.in_flight > 0

    def to_dict(self) -> dict:
        return {
            "status": self.status.value,
            "last_error": self.last_error,
            "last_synced_at": self.last_synced_at.isoformat() if self.last_synced_at else None,
            "in_flight": self.in_flight,
        }


class SyncService:
    """Pushes and pulls both histories, the custom workouts and the profile."""

    def __init__(
        self,
        local: LocalStore,
        remote: RemoteStore,
        config: SyncConfig | None = None,
        events: EventBus | None = None,
    ):
        self.local = local
        self.remote = remote
        self.config = config or SyncConfig()
        self.events = events or EventBus()
        self.state = SyncState()
        self.log = logger.bind(component="sync", user_id=self.config.user_id)

        # Syncs of the same collection queue behind each other
        self._locks = {name: asyncio.Lock() for name in LOCK_ORDER}
        self._pull_hooks: list[PullHook] = []
        self._pushed_this_sign_in = False
        self._tasks: set[asyncio.Task] = set()

    # Sign-in lifecycle

    def on_authenticated(self, callback: SyncCallback | None = None) -> asyncio.Task | None:
        """Push local history once per sign-in.

        Must be called from a running event loop.

        Returns:
            The push task, or None if this sign-in already triggered one
        """
        if self._pushed_this_sign_in:
            self.log.debug("auto_push_skipped")
            return None
        self._pushed_this_sign_in = True
        self.log.info("auto_push_scheduled")
        return self.push_in_background(callback)

    def on_signed_out(self) -> None:
        """Reset the once-per-sign-in guard and the status."""
        self._pushed_this_sign_in = False
        self.state = SyncState(in_flight=self.state.in_flight)
        self.log.info("sync_state_reset")

    # Remote calls

    async def _call(self, collection: str, call: Awaitable[T]) -> T:
        timeout = self.config.timeout_seconds
        try:
            return await asyncio.wait_for(call, timeout=timeout)
        except asyncio.TimeoutError as e:
            raise SyncError(f"{collection}: timed out after {timeout:g}s", collection) from e
        except RemoteStoreError as e:
            raise SyncError(f"{collection}: {e}", collection) from e

    def _begin(self, operation: str) -> None:
        self.state.in_flight += 1
        self.state.status = SyncStatus.SYNCING
        self.log.info("sync_started", operation=operation)
        self.events.publish("sync.started", f"{operation.capitalize()} started", {"operation": operation})

    def _succeed(self, operation: str, **counts) -> None:
        self.state.status = SyncStatus.SUCCEEDED
        self.state.last_error = None
        self.state.last_synced_at = datetime.now()
        self.log.info("sync_succeeded", operation=operation, **counts)
        self.events.publish(
            "sync.succeeded", f"{operation.capitalize()} complete", {"operation": operation, **counts}
        )

    def _fail(self, operation: str, error: SyncError) -> None:
        self.state.status = SyncStatus.FAILED
        self.state.last_error = str(error)
        self.log.warning("sync_failed", operation=operation, collection=error.collection, error=str(error))
        self.events.publish(
            "sync.failed",
            f"{operation.capitalize()} failed: {error}",
            {"operation": operation, "collection": error.collection},
        )

    # Locking

    @asynccontextmanager
    async def _holding_all(self):
        """Hold every collection lock for a whole push or pull.

        Locks are always taken in the same order, so a push and a pull
        queue behind each other instead of interleaving.
        """
        async with AsyncExitStack() as stack:
            for name in LOCK_ORDER:
                await stack.enter_async_context(self._locks[name])
            yield

    async def _local(self, call: Awaitable[T]) -> T:
        try:
            return await call
        except (aiosqlite.Error, OSError) as e:
            raise SyncError(f"local store: {e}", "local") from e

    def add_pull_hook(self, hook: PullHook) -> None:
        """Run ``hook`` after every successful pull, before it is reported.

        In-memory owners of local state (such as the tracker) register
        here to reload what the pull overwrote.
        """
        self._pull_hooks.append(hook)

    # Push

    async def push_all(self) -> bool:
        """Replace every remote collection with the local version.

        Each collection is replaced atomically on the remote side. If a later
        collection fails, earlier ones keep the new version.

        Returns:
            True on success; on failure the error is recorded on ``state``
        """
        self._begin("push")
        try:
            async with self._holding_all():
                sessions = await self._local(self.local.load_measurement_sessions())
                workouts = await self._local(self.local.load_workout_sessions())
                custom_workouts = await self._local(self.local.load_custom_workouts())
                profile = await self._local(self.local.load_profile())

                payloads = {
                    MEASUREMENT_SESSIONS: [s.to_dict() for s in sessions],
                    WORKOUT_SESSIONS: [w.to_dict() for w in workouts],
                    CUSTOM_WORKOUTS: [w.to_dict() for w in custom_workouts],
                }
                for collection, items in payloads.items():
                    await self._call(collection, self.remote.replace_all(collection, items))

                if profile is not None:
                    await self._call(PROFILE, self.remote.set_profile(profile.to_dict()))
        except SyncError as e:
            self._fail("push", e)
            return False
        except asyncio.CancelledError:
            self._fail("push", SyncError("cancelled"))
            raise
        except Exception as e:
            self._fail("push", SyncError(f"unexpected error: {e}"))
            raise
        else:
            self._succeed(
                "push",
                measurement_sessions=len(sessions),
                workout_sessions=len(workouts),
                custom_workouts=len(custom_workouts),
                profile=profile is not None,
            )
            return True
        finally:
            self.state.in_flight -= 1

    # Pull

    async def pull_all(self) -> bool:
        """Replace the local collections with the remote versions.

        Everything is fetched and parsed before anything is written, and the
        local write is a single transaction, so a failed pull leaves local
        state untouched.
        """
        self._begin("pull")
        try:
            async with self._holding_all():
                fetched: dict[str, list[dict]] = {}
                for collection in COLLECTIONS:
                    fetched[collection] = await self._call(
                        collection, self.remote.fetch_all(collection)
                    )
                profile_data = await self._call(PROFILE, self.remote.get_profile())

                sessions = _parse(MEASUREMENT_SESSIONS, fetched[MEASUREMENT_SESSIONS], MeasurementSession.from_dict)
                workouts = _parse(WORKOUT_SESSIONS, fetched[WORKOUT_SESSIONS], WorkoutSession.from_dict)
                custom_workouts = _parse(CUSTOM_WORKOUTS, fetched[CUSTOM_WORKOUTS], CustomWorkout.from_dict)
                profile = _parse(PROFILE, [profile_data], UserProfile.from_dict)[0] if profile_data else None
                await self._local(
                    self.local.replace_collections(
                        sessions, workouts, profile, custom_workouts=custom_workouts
                    )
                )

                for hook in self._pull_hooks:
                    await self._local(hook())
        except SyncError as e:
            self._fail("pull", e)
            return False
        except asyncio.CancelledError:
            self._fail("pull", SyncError("cancelled"))
            raise
        except Exception as e:
            self._fail("pull", SyncError(f"unexpected error: {e}"))
            raise
        else:
            self._succeed(
                "pull",
                measurement_sessions=len(sessions),
                workout_sessions=len(workouts),
                custom_workouts=len(custom_workouts),
                profile=profile is not None,
            )
            return True
        finally:
            self.state.in_flight -= 1

    # Background scheduling

    def push_in_background(self, callback: SyncCallback | None = None) -> asyncio.Task:
        """Schedule ``push_all`` and report the outcome to ``callback``."""
        return self._schedule(self.push_all, callback)

    def pull_in_background(self, callback: SyncCallback | None = None) -> asyncio.Task:
        """Schedule ``pull_all`` and report the outcome to ``callback``."""
        return self._schedule(self.pull_all, callback)

    def _schedule(
        self, operation: Callable[[], Awaitable[bool]], callback: SyncCallback | None
    ) -> asyncio.Task:
        async def run() -> bool:
            try:
                ok = await operation()
            except Exception:
                self.log.exception("background_sync_failed")
                ok = False
            if callback is not None:
                try:
                    callback(ok, self.state.last_error)
                except Exception:
                    self.log.exception("sync_callback_failed")
            return ok

        task = asyncio.create_task(run())
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_for_background(self) -> None:
        """Wait for every scheduled sync to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))


def _parse(collection: str, items: list, factory: Callable[[dict], T]) -> list[T]:
    try:
        return [factory(item) for item in items]
    except MALFORMED_DATA_ERRORS as e:
        raise SyncError(f"{collection}: malformed remote data ({e})", collection) from e
