"""Service layer for business logic and external integrations."""

from .activity_log import ActivityLogService
from .authorization import Principal, ensure_workspace_access
from .config import AppConfig, get_config, reload_config
from .container import Services, build_services, get_services
from .database import DatabaseService, init_database
from .errors import (
    ExternalServiceError,
    NotFoundError,
    ServiceError,
    UnauthorizedError,
    ValidationFailure,
)
from .events import ActivityEvent, EventBus
from .note_generator import NoteGenerator, parse_note_json
from .notes import NoteService
from .users import UserDirectory

__all__ = [
    "AppConfig",
    "get_config",
    "reload_config",
    "DatabaseService",
    "init_database",
    "Services",
    "build_services",
    "get_services",
    "ServiceError",
    "NotFoundError",
    "UnauthorizedError",
    "ValidationFailure",
    "ExternalServiceError",
    "ActivityEvent",
    "EventBus",
    "Principal",
    "ensure_workspace_access",
    "UserDirectory",
    "NoteService",
    "ActivityLogService",
    "NoteGenerator",
    "parse_note_json",
]
