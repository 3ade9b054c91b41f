from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .auth.service import AuthService, CredentialsProvider, StaticCredentialsProvider, parse_credentials
from .core.constants import DEFAULT_DATA_FILE
from .core.enums import StorageBackend
from .core.exceptions import ValidationError
from .events.repository import EventRepository
from .events.service import LedgerService
from .exchange.service import ImportService
from .members.repository import MemberRepository
from .members.service import MemberRegistry
from .standings.service import StandingService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Container:
    members_repo: MemberRepository
    events_repo: EventRepository

    registry: MemberRegistry
    ledger: LedgerService
    standings: StandingService
    importer: ImportService
    auth_service: AuthService


def build_repositories(settings: Mapping[str, Any]) -> tuple[MemberRepository, EventRepository]:
    """Pick the storage adapter pair named by STORAGE_BACKEND."""

    raw = str(settings.get("STORAGE_BACKEND") or StorageBackend.MEMORY.value).lower()
    try:
        backend = StorageBackend(raw)
    except ValueError:
        raise ValidationError(f"Unknown STORAGE_BACKEND: {raw!r}")

    if backend == StorageBackend.JSON:
        from .storage.json_store import JsonEventRepository, JsonFileStore, JsonMemberRepository

        store = JsonFileStore(settings.get("DATA_FILE") or DEFAULT_DATA_FILE)
        logger.info("Storage: JSON file %s", store.path)
        return JsonMemberRepository(store), JsonEventRepository(store)

    if backend == StorageBackend.MYSQL:
        from .database.connection import DatabaseConnection, DBConfig
        from .events.mysql_event_repository import MySQLEventRepository
        from .members.mysql_member_repository import MySQLMemberRepository

        config = DBConfig.from_dict(dict(settings.get("DB_CONFIG") or {}))
        conn = DatabaseConnection.get_instance(config)
        logger.info("Storage: MySQL %s@%s:%s/%s", config.user, config.host, config.port, config.database)
        return MySQLMemberRepository(conn), MySQLEventRepository(conn)

    from .storage.memory import InMemoryEventRepository, InMemoryMemberRepository

    logger.info("Storage: in-memory")
    return InMemoryMemberRepository(), InMemoryEventRepository()


def build_container(
    *,
    settings: Mapping[str, Any],
    members_repo: Optional[MemberRepository] = None,
    events_repo: Optional[EventRepository] = None,
    credentials: Optional[CredentialsProvider] = None,
) -> Container:
    if members_repo is None or events_repo is None:
        members_repo, events_repo = build_repositories(settings)

    if credentials is None:
        credentials = StaticCredentialsProvider.from_pairs(parse_credentials(settings.get("ADMIN_CREDENTIALS") or ""))

    registry = MemberRegistry(members_repo, events_repo)
    ledger = LedgerService(events_repo, registry)
    standings = StandingService(registry, ledger)
    importer = ImportService(registry)
    auth_service = AuthService(credentials)

    return Container(
        members_repo=members_repo,
        events_repo=events_repo,
        registry=registry,
        ledger=ledger,
        standings=standings,
        importer=importer,
        auth_service=auth_service,
    )
