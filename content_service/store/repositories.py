"""Per-entity data access over the content store.

Every method opens its own session, so independent reads can run
concurrently. Listings sort by display_order, newest first on ties.
"""

from typing import Any

from sqlalchemy import delete, select

from content_service.store.database import ContentStore
from content_service.store.models import (
    FAQ,
    ContentItem,
    ContentModel,
    ContentSection,
    Testimonial,
)


class Repository:
    """CRUD for one content model."""

    model: type[ContentModel]

    def __init__(self, store: ContentStore):
        self._store = store

    def _ordered(self, *criteria):
        stmt = select(self.model)
        if criteria:
            stmt = stmt.where(*criteria)
        return stmt.order_by(self.model.display_order.asc(), self.model.created_at.desc())

    async def _scalars(self, stmt) -> list:
        async with self._store.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def find_all(self) -> list:
        """Active rows only."""
        return await self._scalars(self._ordered(self.model.is_active.is_(True)))

    async def find_all_for_admin(self) -> list:
        return await self._scalars(self._ordered())

    async def find_by_id(self, obj_id: str):
        async with self._store.session() as session:
            return await session.get(self.model, obj_id)

    async def create(self, data: dict[str, Any]):
        obj = self.model()
        _assign(obj, data)
        async with self._store.session() as session:
            session.add(obj)
            await session.commit()
            await session.refresh(obj)
        return obj

    async def update(self, obj_id: str, data: dict[str, Any]):
        """Apply `data` to the row; None if no row has this id."""
        async with self._store.session() as session:
            obj = await session.get(self.model, obj_id)
            if obj is None:
                return None
            _assign(obj, data)
            await session.commit()
            await session.refresh(obj)
            return obj

    async def delete(self, obj_id: str) -> bool:
        async with self._store.session() as session:
            result = await session.execute(delete(self.model).where(self.model.id == obj_id))
            await session.commit()
            return result.rowcount > 0


class ContentSectionRepository(Repository):
    model = ContentSection

    async def find_by_key(self, key: str, *, active_only: bool = True) -> ContentSection | None:
        criteria = [ContentSection.key == key]
        if active_only:
            criteria.append(ContentSection.is_active.is_(True))
        rows = await self._scalars(self._ordered(*criteria).limit(1))
        return rows[0] if rows else None

    async def delete(self, obj_id: str) -> bool:
        """Hard-delete the section and every item that belongs to it."""
        async with self._store.session() as session:
            await session.execute(delete(ContentItem).where(ContentItem.section_id == obj_id))
            result = await session.execute(
                delete(ContentSection).where(ContentSection.id == obj_id)
            )
            await session.commit()
            return result.rowcount > 0


class ContentItemRepository(Repository):
    model = ContentItem

    async def find_by_section_id(
        self, section_id: str, *, active_only: bool = True
    ) -> list[ContentItem]:
        criteria = [ContentItem.section_id == section_id]
        if active_only:
            criteria.append(ContentItem.is_active.is_(True))
        return await self._scalars(self._ordered(*criteria))


class TestimonialRepository(Repository):
    model = Testimonial


class FAQRepository(Repository):
    model = FAQ


def _assign(obj: ContentModel, data: dict[str, Any]) -> None:
    for field, value in data.items():
        if field == "metadata":
            field = "metadata_"
        setattr(obj, field, value)
