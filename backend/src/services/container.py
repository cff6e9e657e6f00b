"""Wire the services against one database and one event bus."""

from __future__ import annotations

from concurrent.futures import Executor, ThreadPoolExecutor
from dataclasses import dataclass
from functools import lru_cache

from fastapi import Depends

from .activity_log import ActivityLogService
from .clock import Clock, epoch_ms
from .config import AppConfig, get_config
from .database import DatabaseService
from .events import EventBus
from .note_generator import NoteGenerator
from .notes import NoteService
from .users import UserDirectory


@dataclass
class Services:
    """Everything a request handler needs."""

    db: DatabaseService
    events: EventBus
    users: UserDirectory
    activity_log: ActivityLogService
    notes: NoteService
    generator: NoteGenerator

    def close(self) -> None:
        """Flush pending activity events."""
        self.events.shutdown()


def build_services(
    config: AppConfig,
    *,
    clock: Clock | None = None,
    executor: Executor | None = None,
) -> Services:
    """Create and initialize the service graph for ``config``."""
    clock = clock or epoch_ms
    db = DatabaseService(config.database_path)
    db.initialize()

    events = EventBus(executor)
    users = UserDirectory(
        db, event_bus=events, clock=clock, active_window_ms=config.active_window_ms
    )
    activity_log = ActivityLogService(
        db, users=users, clock=clock, capacity=config.activity_log_capacity
    )
    events.subscribe(activity_log.record_event)
    notes = NoteService(db, users=users, event_bus=events, clock=clock)
    generator = NoteGenerator(notes, config=config, event_bus=events, clock=clock)
    return Services(
        db=db,
        events=events,
        users=users,
        activity_log=activity_log,
        notes=notes,
        generator=generator,
    )


@lru_cache(maxsize=1)
def get_services() -> Services:
    """Application-wide services; activity events go to one background worker."""
    return build_services(
        get_config(),
        executor=ThreadPoolExecutor(max_workers=1, thread_name_prefix="activity-log"),
    )


def get_user_directory(services: Services = Depends(get_services)) -> UserDirectory:
    return services.users


def get_note_service(services: Services = Depends(get_services)) -> NoteService:
    return services.notes


def get_activity_log_service(services: Services = Depends(get_services)) -> ActivityLogService:
    return services.activity_log


def get_note_generator(services: Services = Depends(get_services)) -> NoteGenerator:
    return services.generator


__all__ = [
    "Services",
    "build_services",
    "get_services",
    "get_user_directory",
    "get_note_service",
    "get_activity_log_service",
    "get_note_generator",
]
