"""
Generic catalog repository shared by services, plans, products and episodes.

Each catalog table has a business key (`service_id`, `plan_id`, ...) next to
its surrogate UUID, JSON list columns, a `display_order`, and a status
column whose "inactive" value doubles as the soft-delete marker. The
entity modules configure one `CatalogRepository` each and add the queries
that only make sense for that entity.

Repository rules (same as the rest of this package):
- Every method receives AsyncSession explicitly
- Methods flush, but never commit
- Multi-statement writes run inside `atomic()` (a SAVEPOINT)
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterable, Sequence, TypeVar

from sqlalchemy import ColumnElement, Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import ConflictError, DuplicateKeyError, NotFoundError, ValidationError
from app.core.logging import get_logger
from app.db.models.base import Base, utcnow
from app.db.session import atomic

ModelT = TypeVar("ModelT", bound=Base)

FilterBuilder = Callable[[Any], ColumnElement[bool]]

_GENERATED_COLUMNS = {"id", "created_at", "updated_at"}

LIKE_ESCAPE = "\\"


def escape_like(term: str) -> str:
    """Make `%` and `_` in user input match literally; use with `escape=LIKE_ESCAPE`."""
    return (
        term.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
        .replace("%", LIKE_ESCAPE + "%")
        .replace("_", LIKE_ESCAPE + "_")
    )


def featured_lock(dialect_name: str, table_name: str) -> Select | None:
    """
    Transaction-scoped lock taken before clearing and setting an exclusive
    featured flag, so concurrent writers apply one after the other.

    SQLite already serialises writers and needs none.
    """
    if dialect_name != "postgresql":
        return None
    return select(func.pg_advisory_xact_lock(func.hashtext(f"{table_name}.featured")))


@dataclass(frozen=True)
class ListResult(Generic[ModelT]):
    """One page of rows plus the unpaginated total."""

    items: list[ModelT]
    total: int


class CatalogRepository(Generic[ModelT]):
    """CRUD, ordering, status and featured handling for one catalog table."""

    def __init__(
        self,
        model: type[ModelT],
        *,
        key_field: str,
        required: Iterable[str],
        updatable: Iterable[str],
        statuses: Iterable[str],
        visible_statuses: Iterable[str],
        inactive_status: str,
        order_by: Sequence[ColumnElement[Any]],
        filters: dict[str, FilterBuilder] | None = None,
        owner_field: str | None = "created_by",
        featured_field: str | None = None,
        exclusive_featured: bool = False,
    ) -> None:
        self.model = model
        self.key_field = key_field
        self.required = frozenset(required)
        self.updatable = frozenset(updatable)
        self.statuses = tuple(statuses)
        self.visible_statuses = frozenset(visible_statuses)
        self.inactive_status = inactive_status
        self.order_by = tuple(order_by)
        self.filters = dict(filters or {})
        self.owner_field = owner_field
        self.featured_field = featured_field
        self.exclusive_featured = exclusive_featured

        self.table_name = model.__tablename__
        self.columns = {c.key: c for c in model.__table__.columns}
        self.writable = frozenset(self.columns) - _GENERATED_COLUMNS
        self.logger = get_logger(f"repositories.{self.table_name}")

    # ─── Helpers ──────────────────────────────────────────
    @property
    def key_column(self) -> ColumnElement[Any]:
        return getattr(self.model, self.key_field)

    def _check_status(self, status: str) -> None:
        if status not in self.statuses:
            raise ValidationError(
                f"Invalid status '{status}'. Allowed values: {', '.join(self.statuses)}"
            )

    def _visible(self) -> ColumnElement[bool]:
        return self.model.status.in_(self.visible_statuses)

    def _drop_null_required(self, fields: dict[str, Any]) -> dict[str, Any]:
        """Skip explicit nulls for NOT NULL columns instead of failing at the store."""
        return {
            key: value
            for key, value in fields.items()
            if value is not None or self.columns[key].nullable
        }

    async def _key_taken(self, db: AsyncSession, key: str) -> bool:
        stmt = select(self.key_column).where(self.key_column == key)
        return (await db.execute(stmt)).first() is not None

    async def _get_for_write(self, db: AsyncSession, key: str) -> ModelT:
        stmt = select(self.model).where(self.key_column == key)
        record = (await db.execute(stmt)).scalar_one_or_none()
        if record is None:
            raise NotFoundError(f"{self.model.__name__} '{key}' not found")
        return record

    async def _clear_featured(self, db: AsyncSession, except_key: str) -> None:
        lock = featured_lock(db.get_bind().dialect.name, self.table_name)
        if lock is not None:
            await db.execute(lock)
        featured = getattr(self.model, self.featured_field)
        stmt = (
            update(self.model)
            .where(featured.is_(True), self.key_column != except_key)
            .values({self.featured_field: False, "updated_at": utcnow()})
        )
        await db.execute(stmt)

    def build_filters(self, filters: dict[str, Any] | None) -> list[ColumnElement[bool]]:
        """Translate allow-listed filter values into WHERE clauses; other keys are ignored."""
        clauses: list[ColumnElement[bool]] = []
        for name, value in (filters or {}).items():
            builder = self.filters.get(name)
            if builder is None or value is None or value == "":
                continue
            clauses.append(builder(value))
        return clauses

    # ─── Reads ────────────────────────────────────────────
    async def get_by_key(
        self,
        db: AsyncSession,
        key: str,
        *,
        include_hidden: bool = False,
    ) -> ModelT | None:
        """Point lookup by business key; hidden statuses need `include_hidden`."""
        stmt = select(self.model).where(self.key_column == key)
        if not include_hidden:
            stmt = stmt.where(self._visible())
        return (await db.execute(stmt)).scalar_one_or_none()

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: uuid.UUID,
        *,
        include_hidden: bool = False,
    ) -> ModelT | None:
        """Point lookup by surrogate id."""
        stmt = select(self.model).where(self.model.id == record_id)
        if not include_hidden:
            stmt = stmt.where(self._visible())
        return (await db.execute(stmt)).scalar_one_or_none()

    async def list(
        self,
        db: AsyncSession,
        *,
        filters: dict[str, Any] | None = None,
        status: str | None = None,
        include_inactive: bool = False,
        offset: int = 0,
        limit: int = 20,
    ) -> ListResult[ModelT]:
        """Filtered, ordered page of rows plus a total from a separate count query."""
        clauses = self.build_filters(filters)
        if status:
            self._check_status(status)
            clauses.append(self.model.status == status)
        elif not include_inactive:
            clauses.append(self._visible())

        count_stmt = select(func.count()).select_from(self.model).where(*clauses)
        total = (await db.execute(count_stmt)).scalar_one()

        stmt = (
            select(self.model)
            .where(*clauses)
            .order_by(*self.order_by)
            .offset(max(offset, 0))
            .limit(max(limit, 1))
        )
        items = list((await db.execute(stmt)).scalars().all())
        return ListResult(items=items, total=total)

    # ─── Writes ───────────────────────────────────────────
    async def create(
        self,
        db: AsyncSession,
        fields: dict[str, Any],
        *,
        user_id: uuid.UUID | None = None,
    ) -> ModelT:
        """Insert a row. A taken business key raises DuplicateKeyError."""
        missing = sorted(
            name for name in self.required if fields.get(name) in (None, "")
        )
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                details={"missing": missing},
            )

        data = self._drop_null_required(
            {key: value for key, value in fields.items() if key in self.writable}
        )
        if "status" in data:
            self._check_status(data["status"])
        if self.owner_field and user_id is not None:
            data[self.owner_field] = user_id

        key = data[self.key_field]
        record = self.model(**data)
        try:
            async with atomic(db):
                if self.exclusive_featured and data.get(self.featured_field):
                    await self._clear_featured(db, except_key=key)
                db.add(record)
                await db.flush()
        except ConflictError as exc:
            if await self._key_taken(db, key):
                raise DuplicateKeyError(
                    f"{self.model.__name__} with {self.key_field} '{key}' already exists"
                ) from None
            raise ConflictError(
                f"{self.model.__name__} '{key}' conflicts with an existing record",
                details=exc.details,
            ) from None

        self.logger.info("Record created", key=key, user_id=str(user_id) if user_id else None)
        return record

    async def update(
        self,
        db: AsyncSession,
        key: str,
        fields: dict[str, Any],
    ) -> ModelT:
        """Apply allow-listed fields. Nothing allowed left raises ValidationError."""
        data = self._drop_null_required(
            {name: value for name, value in fields.items() if name in self.updatable}
        )
        if not data:
            raise ValidationError("No valid fields to update")
        if "status" in data:
            self._check_status(data["status"])

        async with atomic(db):
            record = await self._get_for_write(db, key)
            if self.exclusive_featured and data.get(self.featured_field):
                await self._clear_featured(db, except_key=key)
            for name, value in data.items():
                setattr(record, name, value)
            record.updated_at = utcnow()
            await db.flush()

        self.logger.info("Record updated", key=key, fields=sorted(data))
        return record

    async def change_status(self, db: AsyncSession, key: str, status: str) -> ModelT:
        """Move a row to another status of its enum."""
        self._check_status(status)
        record = await self._get_for_write(db, key)
        record.status = status
        record.updated_at = utcnow()
        await db.flush()
        self.logger.info("Status changed", key=key, status=status)
        return record

    async def set_featured(self, db: AsyncSession, key: str, featured: bool) -> ModelT:
        """Toggle the featured flag; exclusive tables clear every other row first."""
        if self.featured_field is None:
            raise ValidationError(f"{self.model.__name__} has no featured flag")

        async with atomic(db):
            record = await self._get_for_write(db, key)
            if featured and self.exclusive_featured:
                await self._clear_featured(db, except_key=key)
            setattr(record, self.featured_field, featured)
            record.updated_at = utcnow()
            await db.flush()

        self.logger.info("Featured flag set", key=key, featured=featured)
        return record

    async def reorder(self, db: AsyncSession, order: Sequence[tuple[str, int]]) -> int:
        """Apply every (key, display_order) pair or none of them."""
        if not order:
            raise ValidationError("Order list cannot be empty")

        async with atomic(db):
            for key, position in order:
                record = await self._get_for_write(db, key)
                record.display_order = position
                record.updated_at = utcnow()
                await db.flush()

        self.logger.info("Records reordered", count=len(order))
        return len(order)

    async def soft_delete(self, db: AsyncSession, key: str) -> ModelT:
        """Flip to the inactive status; reversible with `change_status`."""
        return await self.change_status(db, key, self.inactive_status)

    async def hard_delete(self, db: AsyncSession, key: str) -> None:
        """Irreversibly remove the row."""
        record = await self._get_for_write(db, key)
        await db.delete(record)
        await db.flush()
        self.logger.warning("Record permanently deleted", key=key)

    async def import_records(
        self,
        db: AsyncSession,
        records: Iterable[dict[str, Any]],
        *,
        user_id: uuid.UUID | None = None,
    ) -> list[ModelT]:
        """
        Best-effort bulk insert of already-mapped records.

        A taken business key falls back to updating that row with the same
        fields; any other error aborts the batch.
        """
        imported: list[ModelT] = []
        for fields in records:
            try:
                imported.append(await self.create(db, fields, user_id=user_id))
            except DuplicateKeyError:
                changes = {k: v for k, v in fields.items() if k != self.key_field}
                imported.append(await self.update(db, fields[self.key_field], changes))
        self.logger.info("Legacy records imported", count=len(imported))
        return imported
