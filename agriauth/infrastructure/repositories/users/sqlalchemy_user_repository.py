# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import or_, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from agriauth.domain.users.entities import NewUser
from agriauth.domain.users.entities import User as DomainUser
from agriauth.domain.users.exceptions import UserAlreadyExistsError
from agriauth.domain.users.repositories import UserRepository
from agriauth.infrastructure.db.models import UserRecord
from agriauth.infrastructure.db.session import Database
from agriauth.shared.errors.base import StorageError
from agriauth.shared.logging import logger


def _as_utc(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


def _to_domain(row: UserRecord) -> DomainUser:
    return DomainUser(
        id=row.id,
        username=row.username,
        mobile=row.mobile,
        first_name=row.first_name,
        last_name=row.last_name,
        password_hash=row.password_hash,
        created_at=_as_utc(row.created_at) or datetime.now(UTC),
        last_login_at=_as_utc(row.last_login_at),
    )


def _has_clash(session: Session, username: str, mobile: str) -> bool:
    clash = session.scalar(
        select(UserRecord.id)
        .where(or_(UserRecord.username == username, UserRecord.mobile == mobile))
        .limit(1)
    )
    return clash is not None


class SqlAlchemyUserRepository(UserRepository):
    def __init__(self, database: Database) -> None:
        self._db = database

    def create(self, new_user: NewUser) -> DomainUser:
        try:
            with self._db.session_scope() as session:
                if _has_clash(session, new_user.username, new_user.mobile):
                    raise UserAlreadyExistsError()
                row = UserRecord(
                    username=new_user.username,
                    mobile=new_user.mobile,
                    first_name=new_user.first_name,
                    last_name=new_user.last_name,
                    password_hash=new_user.password_hash,
                )
                session.add(row)
                session.flush()
                created = _to_domain(row)
        except IntegrityError as exc:
            # A concurrent signup won the race between the lookup and the insert.
            logger.info("users.create: unique constraint rejected insert")
            raise UserAlreadyExistsError() from exc
        except SQLAlchemyError as exc:
            logger.error(f"users.create: storage failure {type(exc).__name__}")
            raise StorageError() from exc
        logger.info(f"users.create: ok user_id={created.id}")
        return created

    def exists(self, username: str, mobile: str) -> bool:
        try:
            with self._db.session_scope() as session:
                return _has_clash(session, username, mobile)
        except SQLAlchemyError as exc:
            logger.error(f"users.exists: storage failure {type(exc).__name__}")
            raise StorageError() from exc

    def find_by_username(self, username: str) -> DomainUser | None:
        return self._find_one(UserRecord.username == username, "find_by_username")

    def find_by_id(self, user_id: str) -> DomainUser | None:
        return self._find_one(UserRecord.id == user_id, "find_by_id")

    def touch_last_login(self, user_id: str, at: datetime) -> None:
        try:
            with self._db.session_scope() as session:
                session.execute(
                    update(UserRecord).where(UserRecord.id == user_id).values(last_login_at=at)
                )
        except SQLAlchemyError as exc:
            logger.error(f"users.touch_last_login: storage failure {type(exc).__name__}")
            raise StorageError() from exc

    def update_password_hash(self, user_id: str, password_hash: str) -> None:
        try:
            with self._db.session_scope() as session:
                session.execute(
                    update(UserRecord)
                    .where(UserRecord.id == user_id)
                    .values(password_hash=password_hash)
                )
        except SQLAlchemyError as exc:
            logger.error(f"users.update_password_hash: storage failure {type(exc).__name__}")
            raise StorageError() from exc

    def _find_one(self, criterion, operation: str) -> DomainUser | None:
        try:
            with self._db.session_scope() as session:
                row = session.scalars(select(UserRecord).where(criterion)).first()
                return _to_domain(row) if row else None
        except SQLAlchemyError as exc:
            logger.error(f"users.{operation}: storage failure {type(exc).__name__}")
            raise StorageError() from exc
