from __future__ import annotations
from functools import cache
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Generic,
    Sequence,
    Type,
    TypeVar,
)
import logging
from sqlalchemy import (
    Engine,
    select,
    text,
    delete,
    create_engine,
    NullPool,
    StaticPool,
    asc,
    desc,
)
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from mindful_chat.models.base import Base
from mindful_chat.settings import config

if TYPE_CHECKING:
    from sqlalchemy import ColumnExpressionArgument


logger = logging.getLogger(__name__)

V = TypeVar("V", bound=Type)


@cache
def get_engine(url: str) -> Engine:
    """
    Engines are cached per URL so every CRUD helper pointed at the same
    database shares one. An in-memory SQLite database only exists for the
    lifetime of its connection, so it is pinned to a single one.
    """
    if url.startswith("sqlite"):
        pool = StaticPool if url in ("sqlite://", "sqlite:///:memory:") else NullPool
        return create_engine(
            url, poolclass=pool, connect_args={"check_same_thread": False}
        )
    return create_engine(url, poolclass=NullPool)


@cache
def get_session_factory(url: str) -> Callable[..., Session]:
    return sessionmaker(get_engine(url), expire_on_commit=False)


def init_db(url: str | None = None) -> None:
    """Create any missing tables."""
    from mindful_chat.models import chat  # noqa: F401

    Base.metadata.create_all(bind=get_engine(url or config.db_url))


def check_connection(url: str | None = None) -> bool:
    try:
        with get_engine(url or config.db_url).connect() as conn:
            conn.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.error("Database connection check failed", exc_info=True)
        return False
    return True


class CRUDCapability(Generic[V]):
    resource_db: Type[V]

    def __init__(self, resource_db: Type[V], db_url: str | None = None) -> None:
        self.resource_db = resource_db
        self.db_url = db_url

    def db_row_to_model(self, row: V):
        return {field.name: getattr(row, field.name) for field in row.__table__.c}

    def db_rows_to_model_list(self, rows: Sequence[V]) -> list[dict]:
        return [
            {field.name: getattr(r, field.name) for field in r.__table__.c}
            for r in rows
        ]

    def get_sync_session(self) -> Session:
        factory = get_session_factory(self.db_url or config.db_url)
        return factory()

    def list_resource(
        self,
        where: list["ColumnExpressionArgument[bool]"] | None = None,
        limit: int | None = None,
        offset: int | None = None,
        order_by: list[str] | None = None,
    ) -> list[dict[str, Any]]:
        stmt = select(self.resource_db)
        if where is not None:
            stmt = stmt.where(*where)
        if order_by is not None:
            order_by_clauses = []
            for item in order_by:
                if item.startswith("-"):
                    column = getattr(self.resource_db, item[1:])
                    order_by_clauses.append(desc(column))
                else:
                    column = getattr(self.resource_db, item)
                    order_by_clauses.append(asc(column))
            stmt = stmt.order_by(*order_by_clauses)
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)

        session = self.get_sync_session()
        try:
            resources = session.scalars(stmt).all()
            return self.db_rows_to_model_list(resources)
        finally:
            session.close()

    def create_resource(
        self,
        data: dict[str, Any],
    ) -> dict[str, Any]:
        resource = self.resource_db(**data)  # type: ignore
        session = self.get_sync_session()
        try:
            session.add(resource)
            session.flush()
            session.commit()
            session.refresh(resource)
            return self.db_row_to_model(resource)  # type: ignore
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def delete_resources(
        self,
        where: list["ColumnExpressionArgument[bool]"],
    ) -> int:
        """Bulk delete every row matching ``where`` and return the row count."""
        if not where:
            raise ValueError("Refusing to delete without a filter")
        stmt = delete(self.resource_db).where(*where)
        session = self.get_sync_session()
        try:
            result = session.execute(stmt)
            session.commit()
            return result.rowcount or 0
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
