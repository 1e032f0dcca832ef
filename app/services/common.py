"""Query helpers shared by the managers."""

import math
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Type, TypeVar

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import NotFoundError
from app.schemas import Pagination

ModelT = TypeVar("ModelT")


async def get_or_404(db: AsyncSession, model: Type[ModelT], obj_id: Any, label: str) -> ModelT:
    """Fetch a row by primary key or raise NotFoundError("<label> not found")."""
    obj = await db.get(model, obj_id)
    if obj is None:
        raise NotFoundError(f"{label} not found")
    return obj


async def paginate(
    db: AsyncSession, query: Select, page: int, limit: int, options: Sequence[Any] = ()
) -> Tuple[List[Any], Pagination]:
    """Run ``query`` for one page and count the unpaged total.

    Loader ``options`` apply to the page query only.
    """
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total = (await db.execute(count_query)).scalar() or 0

    page_query = query.options(*options).offset((page - 1) * limit).limit(limit)
    result = await db.execute(page_query)
    items = list(result.scalars().unique().all())

    return items, Pagination(
        page=page,
        limit=limit,
        total=total,
        total_pages=math.ceil(total / limit) if limit else 0,
    )


async def count_by(db: AsyncSession, column, ids: Iterable[Any]) -> Dict[Any, int]:
    """Row counts grouped by ``column`` for the given parent ids."""
    ids = list(ids)
    if not ids:
        return {}
    result = await db.execute(
        select(column, func.count()).where(column.in_(ids)).group_by(column)
    )
    return {parent_id: count for parent_id, count in result.all()}
