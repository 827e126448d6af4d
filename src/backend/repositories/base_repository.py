"""
Base repository with the filter/paginate/aggregate query builder.

Resource repositories declare their model, business key column, search
columns, fixed ordering and any joins their filters need; the base class
turns a list of filter conditions into a page of rows, a total count and
grouped counts that all share the same predicate.
"""
from typing import Any, Generic, List, Optional, Sequence, Tuple, Type, TypeVar

from sqlalchemy import and_, case, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import ColumnElement, Select
from sqlmodel import SQLModel

ModelType = TypeVar("ModelType", bound=SQLModel)

LIKE_ESCAPE = "\\"


class BaseRepository(Generic[ModelType]):
    """
    Generic repository providing the shared query-building operations.

    Usage:
        class DeviceRepository(BaseRepository[Device]):
            model = Device
            key_column = "device_id"
            search_columns = ("device_name", "device_brand", "device_id")
    """

    model: Type[ModelType] = None
    key_column: str = "id"
    search_columns: Sequence[str] = ()

    # ------------------------------------------------------------------
    # Predicate helpers
    # ------------------------------------------------------------------

    @staticmethod
    def contains(column: Any, value: str) -> ColumnElement:
        """Case-insensitive substring match with LIKE wildcards escaped."""
        escaped = (
            value.replace(LIKE_ESCAPE, LIKE_ESCAPE * 2)
            .replace("%", LIKE_ESCAPE + "%")
            .replace("_", LIKE_ESCAPE + "_")
        )
        return column.ilike(f"%{escaped}%", escape=LIKE_ESCAPE)

    @classmethod
    def search_clause(cls, term: str, extra_columns: Sequence[Any] = ()) -> ColumnElement:
        """OR of ``contains`` across the repository's search columns."""
        columns = [getattr(cls.model, name) for name in cls.search_columns]
        columns.extend(extra_columns)
        return or_(*(cls.contains(column, term) for column in columns))

    @staticmethod
    def rank(column: Any, precedence: Sequence[str]) -> ColumnElement:
        """
        Sort key placing values in the given precedence (first = 0).

        Unknown values sort last.
        """
        return case(
            {value: index for index, value in enumerate(precedence)},
            value=column,
            else_=len(precedence),
        )

    # ------------------------------------------------------------------
    # Hooks for subclasses
    # ------------------------------------------------------------------

    @classmethod
    def ordering(cls) -> List[Any]:
        """Fixed multi-key sort. Always ends with the primary key."""
        return [cls.model.id.asc()]

    @classmethod
    def joins(cls) -> List[Tuple[Any, Any]]:
        """(target, onclause) pairs outer-joined for filtering."""
        return []

    @classmethod
    def filtered(cls, stmt: Select, conditions: Optional[Sequence[ColumnElement]] = None) -> Select:
        """Apply joins and the AND of all conditions to a statement."""
        stmt = stmt.select_from(cls.model)
        for target, onclause in cls.joins():
            stmt = stmt.outerjoin(target, onclause)
        if conditions:
            stmt = stmt.where(and_(*conditions))
        return stmt

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @classmethod
    async def find_by_key(
        cls,
        db: AsyncSession,
        key: Any,
        *,
        options: Optional[Sequence[Any]] = None,
    ) -> Optional[ModelType]:
        """
        Find a single record by its business key.

        Rows already in the session are refreshed so relationships load
        after a write.
        """
        stmt = (
            select(cls.model)
            .where(getattr(cls.model, cls.key_column) == key)
            .execution_options(populate_existing=True)
        )
        if options:
            stmt = stmt.options(*options)
        result = await db.execute(stmt)
        return result.scalar_one_or_none()

    @classmethod
    async def find_page(
        cls,
        db: AsyncSession,
        *,
        conditions: Optional[Sequence[ColumnElement]] = None,
        page: int = 1,
        limit: int = 20,
        options: Optional[Sequence[Any]] = None,
    ) -> Tuple[List[ModelType], int]:
        """
        Find one page of records plus the total matching count.

        The count and the page are separate statements over the same
        predicate, so a concurrent write between them can skew the total.

        Returns:
            Tuple of (list of records, total count)
        """
        total = await cls.count(db, conditions=conditions)

        stmt = cls.filtered(select(cls.model), conditions)
        if options:
            stmt = stmt.options(*options)
        stmt = stmt.order_by(*cls.ordering())
        stmt = stmt.offset((page - 1) * limit).limit(limit)

        result = await db.execute(stmt)
        return list(result.scalars().all()), total

    @classmethod
    async def find_all(
        cls,
        db: AsyncSession,
        *,
        conditions: Optional[Sequence[ColumnElement]] = None,
    ) -> List[ModelType]:
        """Every record matching the conditions, in the default ordering."""
        stmt = cls.filtered(select(cls.model), conditions).order_by(*cls.ordering())
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @classmethod
    async def find_latest(
        cls,
        db: AsyncSession,
        *,
        conditions: Sequence[ColumnElement],
        order_by: Any,
        limit: int,
    ) -> List[ModelType]:
        """Most recent rows matching the conditions."""
        stmt = select(cls.model).where(and_(*conditions)).order_by(order_by).limit(limit)
        result = await db.execute(stmt)
        return list(result.scalars().all())

    @classmethod
    async def count(
        cls,
        db: AsyncSession,
        *,
        conditions: Optional[Sequence[ColumnElement]] = None,
    ) -> int:
        """Count records matching the conditions."""
        ids = cls.filtered(select(cls.model.id), conditions).subquery()
        result = await db.execute(select(func.count()).select_from(ids))
        return result.scalar() or 0

    @classmethod
    async def group_counts(
        cls,
        db: AsyncSession,
        column: Any,
        *,
        conditions: Optional[Sequence[ColumnElement]] = None,
    ) -> List[Tuple[Any, int]]:
        """Grouped (value, count) rows over the filtered set."""
        stmt = cls.filtered(select(column, func.count(cls.model.id)), conditions)
        stmt = stmt.group_by(column)
        result = await db.execute(stmt)
        return [(value, count) for value, count in result.all()]

    @classmethod
    async def aggregate(
        cls,
        db: AsyncSession,
        fn: Any,
        column: Any,
        *,
        conditions: Optional[Sequence[ColumnElement]] = None,
    ) -> Any:
        """Scalar aggregate (``func.avg``, ``func.min``...) over the filtered set."""
        stmt = cls.filtered(select(fn(column)), conditions)
        result = await db.execute(stmt)
        return result.scalar()
