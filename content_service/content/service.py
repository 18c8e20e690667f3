"""Content service: shapes repository results into API responses.

Public reads only see active rows; admin reads see everything.
Writes validate their payload before touching the store.
"""

import asyncio
from collections.abc import Awaitable, Callable

from content_service.content import schemas
from content_service.errors import ValidationFailed
from content_service.logging.structured import get_logger
from content_service.store.database import ContentStore
from content_service.store.repositories import (
    ContentItemRepository,
    ContentSectionRepository,
    FAQRepository,
    TestimonialRepository,
)

logger = get_logger("service")


def _dicts(rows) -> list[dict]:
    return [row.to_dict() for row in rows]


class ContentService:
    def __init__(self, store: ContentStore):
        self.sections = ContentSectionRepository(store)
        self.items = ContentItemRepository(store)
        self.testimonials = TestimonialRepository(store)
        self.faqs = FAQRepository(store)

        self._section_views: dict[str, Callable[[], Awaitable[dict]]] = {
            "hero": self.get_hero_content,
            "about": self.get_about_content,
            "features": self.get_features_content,
            "events": self.get_events_content,
            "testimonials": self.get_testimonials_content,
            "faqs": self.get_faqs_content,
        }

    # --- Reads ---

    async def get_all_content(self) -> dict:
        """Active sections, items, testimonials and FAQs, fetched concurrently."""
        sections, items, testimonials, faqs = await asyncio.gather(
            self.sections.find_all(),
            self.items.find_all(),
            self.testimonials.find_all(),
            self.faqs.find_all(),
        )
        return {
            "sections": _dicts(sections),
            "items": _dicts(items),
            "testimonials": _dicts(testimonials),
            "faqs": _dicts(faqs),
        }

    async def get_all_content_for_admin(self) -> dict:
        sections, items, testimonials, faqs = await asyncio.gather(
            self.sections.find_all_for_admin(),
            self.items.find_all_for_admin(),
            self.testimonials.find_all_for_admin(),
            self.faqs.find_all_for_admin(),
        )
        return {
            "sections": _dicts(sections),
            "items": _dicts(items),
            "testimonials": _dicts(testimonials),
            "faqs": _dicts(faqs),
        }

    async def get_content_by_section(self, key: str) -> dict:
        view = self._section_views.get(key)
        if view is not None:
            return await view()
        return await self._section_with_items(key)

    async def get_hero_content(self) -> dict:
        return await self._section_with_items("hero")

    async def get_about_content(self) -> dict:
        return await self._section_with_items("about")

    async def get_features_content(self) -> dict:
        return await self._section_with_items("features")

    async def get_events_content(self) -> dict:
        return await self._section_with_items("events")

    async def get_testimonials_content(self) -> dict:
        return {"testimonials": _dicts(await self.testimonials.find_all())}

    async def get_faqs_content(self) -> dict:
        return {"faqs": _dicts(await self.faqs.find_all())}

    async def _section_with_items(self, key: str) -> dict:
        section = await self.sections.find_by_key(key)
        if section is None:
            return {"section": None, "items": []}
        items = await self.items.find_by_section_id(section.id)
        return {"section": section.to_dict(), "items": _dicts(items)}

    # --- Content sections ---

    async def create_content_section(self, body) -> dict:
        data = schemas.parse_payload(schemas.ContentSectionCreate, body)
        section = await self.sections.create(data)
        logger.info(
            "Content section created",
            extra={"log_data": {"section_id": section.id, "key": section.key}},
        )
        return section.to_dict()

    async def update_content_section(self, section_id: str, body) -> dict | None:
        data = schemas.parse_payload(schemas.ContentSectionUpdate, body, partial=True)
        section = await self.sections.update(section_id, data)
        return section.to_dict() if section else None

    async def delete_content_section(self, section_id: str) -> bool:
        return await self.sections.delete(section_id)

    # --- Content items ---

    async def create_content_item(self, body) -> dict:
        data = schemas.parse_payload(schemas.ContentItemCreate, body)
        await self._require_section(data["section_id"])
        item = await self.items.create(data)
        logger.info(
            "Content item created",
            extra={"log_data": {"item_id": item.id, "section_id": item.section_id}},
        )
        return item.to_dict()

    async def update_content_item(self, item_id: str, body) -> dict | None:
        data = schemas.parse_payload(schemas.ContentItemUpdate, body, partial=True)
        if "section_id" in data:
            await self._require_section(data["section_id"])
        item = await self.items.update(item_id, data)
        return item.to_dict() if item else None

    async def delete_content_item(self, item_id: str) -> bool:
        return await self.items.delete(item_id)

    async def _require_section(self, section_id: str) -> None:
        if await self.sections.find_by_id(section_id) is None:
            raise ValidationFailed(
                [{"field": "section_id", "message": "Content section does not exist"}]
            )

    # --- Testimonials ---

    async def create_testimonial(self, body) -> dict:
        data = schemas.parse_payload(schemas.TestimonialCreate, body)
        return (await self.testimonials.create(data)).to_dict()

    async def update_testimonial(self, testimonial_id: str, body) -> dict | None:
        data = schemas.parse_payload(schemas.TestimonialUpdate, body, partial=True)
        testimonial = await self.testimonials.update(testimonial_id, data)
        return testimonial.to_dict() if testimonial else None

    async def delete_testimonial(self, testimonial_id: str) -> bool:
        return await self.testimonials.delete(testimonial_id)

    # --- FAQs ---

    async def create_faq(self, body) -> dict:
        data = schemas.parse_payload(schemas.FAQCreate, body)
        return (await self.faqs.create(data)).to_dict()

    async def update_faq(self, faq_id: str, body) -> dict | None:
        data = schemas.parse_payload(schemas.FAQUpdate, body, partial=True)
        faq = await self.faqs.update(faq_id, data)
        return faq.to_dict() if faq else None

    async def delete_faq(self, faq_id: str) -> bool:
        return await self.faqs.delete(faq_id)
