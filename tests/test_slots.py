"""Tests for content_service/admin/slots.py: fixed-slot editing of ordered items."""

from unittest.mock import AsyncMock

import pytest

from content_service.admin.media import ImageFile
from content_service.admin.notifications import NotificationCenter
from content_service.admin.slots import (
    OrderedContentPage,
    SectionForm,
    SlotForm,
    SlotLayout,
    assign_slots,
)
from content_service.errors import ContentApiError

LAYOUT = SlotLayout(section_key="about", label="Feature box", folder="about")

PNG = ImageFile(filename="box.png", content_type="image/png", data=b"\x89PNG")


def _item(item_id, order, **extra):
    return {"id": item_id, "section_id": "sec-about", "title": item_id.upper(), "display_order": order, **extra}


def _admin_content(items):
    return {
        "sections": [
            {"id": "sec-hero", "key": "hero", "title": "Hero", "image_url": None},
            {"id": "sec-about", "key": "about", "title": "About", "image_url": "https://cdn/about.png"},
        ],
        "items": items + [{"id": "other", "section_id": "sec-hero", "title": "H", "display_order": 1}],
        "testimonials": [],
        "faqs": [],
    }


@pytest.fixture
def client():
    c = AsyncMock()
    c.get_admin_content.return_value = _admin_content([
        _item("box1", 1, image_url="https://cdn/old1.png"),
        _item("box2", 2),
    ])
    c.update_item.side_effect = lambda item_id, data: {"id": item_id, **data}
    c.create_item.side_effect = lambda data: {"id": "new", **data}
    c.update_section.side_effect = lambda section_id, data: {"id": section_id, **data}
    c.upload_image.return_value = {"url": "https://cdn/new.png", "key": "about/new.png"}
    return c


@pytest.fixture
def notifications():
    return NotificationCenter(ttl=60.0)


@pytest.fixture
async def page(client, notifications):
    p = OrderedContentPage(client, LAYOUT, notifications=notifications)
    await p.load()
    return p


class TestAssignSlots:

    def test_items_land_in_matching_slots(self):
        slots = assign_slots([_item("a", 1), _item("b", 2)], LAYOUT)
        assert slots[1].item_id == "a"
        assert slots[2].item_id == "b"
        assert slots[3].item is None
        assert slots[4].item is None

    def test_first_duplicate_wins_and_rest_shadowed(self):
        slots = assign_slots([_item("newest", 1), _item("older", 1)], LAYOUT)
        assert slots[1].item_id == "newest"
        assert slots[1].shadowed == ["older"]

    def test_orders_outside_layout_ignored(self):
        slots = assign_slots([_item("zero", 0), _item("nine", 9)], LAYOUT)
        assert all(slot.item is None for slot in slots.values())

    def test_custom_orders(self):
        layout = SlotLayout(section_key="events", orders=(10, 20))
        slots = assign_slots([_item("b", 20)], layout)
        assert list(slots) == [1, 2]
        assert slots[2].item_id == "b"
        assert slots[2].display_order == 20


class TestLoad:

    async def test_mapping_table(self, page):
        assert page.section["id"] == "sec-about"
        assert page.mapping == {1: "box1", 2: "box2", 3: None, 4: None}
        assert [s.number for s in page.slots()] == [1, 2, 3, 4]

    async def test_active_section_preferred_over_inactive_duplicate(self, client, notifications):
        content = _admin_content([_item("box1", 1)])
        content["sections"].insert(0, {"id": "sec-old", "key": "about", "title": "Old", "is_active": False})
        content["items"].append({"id": "stale", "section_id": "sec-old", "title": "S", "display_order": 2})
        client.get_admin_content.return_value = content

        p = OrderedContentPage(client, LAYOUT, notifications=notifications)
        await p.load()

        assert p.section["id"] == "sec-about"
        assert p.mapping == {1: "box1", 2: None, 3: None, 4: None}

    async def test_inactive_section_used_when_only_match(self, client, notifications):
        client.get_admin_content.return_value = {
            "sections": [{"id": "sec-old", "key": "about", "title": "Old", "is_active": False}],
            "items": [],
        }
        p = OrderedContentPage(client, LAYOUT, notifications=notifications)
        await p.load()
        assert p.section["id"] == "sec-old"

    async def test_missing_section(self, client, notifications):
        client.get_admin_content.return_value = {"sections": [], "items": []}
        p = OrderedContentPage(client, LAYOUT, notifications=notifications)
        await p.load()
        assert p.section is None
        assert p.mapping == {1: None, 2: None, 3: None, 4: None}

        result = await p.submit_slot(1, SlotForm(title="T"))
        assert not result.ok
        client.create_item.assert_not_awaited()


class TestSubmitSlot:

    async def test_updates_only_the_bound_item(self, page, client, notifications):
        result = await page.submit_slot(1, SlotForm(title="Fast", description="Quick"))

        assert result.ok
        client.update_item.assert_awaited_once_with(
            "box1", {"title": "Fast", "description": "Quick", "link_url": None},
        )
        client.create_item.assert_not_awaited()
        assert [n.message for n in notifications.active()] == ["Feature box 1 updated successfully!"]

    async def test_empty_slot_creates_item_with_slot_order(self, page, client):
        result = await page.submit_slot(3, SlotForm(title="Third"))

        assert result.ok
        client.create_item.assert_awaited_once_with({
            "title": "Third",
            "description": None,
            "link_url": None,
            "section_id": "sec-about",
            "display_order": 3,
            "is_active": True,
        })
        client.update_item.assert_not_awaited()

    async def test_image_uploaded_then_old_image_deleted(self, page, client):
        result = await page.submit_slot(1, SlotForm(title="Fast", image=PNG))

        assert result.ok
        assert result.cleanup_error is None
        client.upload_image.assert_awaited_once()
        assert client.upload_image.await_args.args[3] == "about"
        client.delete_image.assert_awaited_once_with(url="https://cdn/old1.png")
        assert client.update_item.await_args.args[1]["image_url"] == "https://cdn/new.png"

    async def test_no_cleanup_when_slot_had_no_image(self, page, client):
        await page.submit_slot(2, SlotForm(title="Two", image=PNG))
        client.delete_image.assert_not_awaited()

    async def test_upload_failure_aborts_before_write(self, page, client, notifications):
        client.upload_image.side_effect = ContentApiError(500, "S3 unavailable")

        result = await page.submit_slot(1, SlotForm(title="Fast", image=PNG))

        assert not result.ok
        assert "S3 unavailable" in result.error
        client.update_item.assert_not_awaited()
        client.delete_image.assert_not_awaited()
        assert [(n.kind, n.message) for n in notifications.active()] == [
            ("error", "Failed to update feature box 1"),
        ]

    async def test_invalid_image_aborts_before_upload(self, page, client):
        bad = ImageFile(filename="doc.pdf", content_type="application/pdf", data=b"%PDF")
        result = await page.submit_slot(1, SlotForm(title="Fast", image=bad))

        assert not result.ok
        client.upload_image.assert_not_awaited()
        client.update_item.assert_not_awaited()

    async def test_cleanup_failure_does_not_block_save(self, page, client, notifications):
        client.delete_image.side_effect = ContentApiError(500, "delete failed")

        result = await page.submit_slot(1, SlotForm(title="Fast", image=PNG))

        assert result.ok
        assert "delete failed" in result.cleanup_error
        client.update_item.assert_awaited_once()
        assert notifications.active()[-1].kind == "success"

    async def test_write_failure_reports_error(self, page, client, notifications):
        client.update_item.side_effect = ContentApiError(400, "Validation failed")

        result = await page.submit_slot(2, SlotForm(title="Two"))

        assert not result.ok
        assert result.error == "Validation failed"
        assert notifications.active()[-1].message == "Failed to update feature box 2"

    async def test_success_reloads_page(self, page, client):
        client.get_admin_content.return_value = _admin_content([
            _item("box1", 1), _item("box2", 2), _item("new", 3),
        ])
        await page.submit_slot(3, SlotForm(title="Third"))
        assert client.get_admin_content.await_count == 2
        assert page.mapping[3] == "new"

    async def test_unknown_slot(self, page):
        with pytest.raises(ValueError):
            await page.submit_slot(5, SlotForm(title="x"))


class TestRemoveImage:

    async def test_deletes_image_and_clears_url(self, page, client, notifications):
        result = await page.remove_slot_image(1)

        assert result.ok
        client.delete_image.assert_awaited_once_with(url="https://cdn/old1.png")
        client.update_item.assert_awaited_once_with("box1", {"title": "BOX1", "image_url": None})
        assert notifications.active()[-1].message == "Image removed from feature box 1"

    async def test_slot_without_image(self, page, client):
        result = await page.remove_slot_image(2)
        assert not result.ok
        client.delete_image.assert_not_awaited()


class TestSubmitSection:

    async def test_updates_section_with_new_image(self, page, client, notifications):
        result = await page.submit_section(SectionForm(title="About us", content="Text", image=PNG))

        assert result.ok
        client.delete_image.assert_awaited_once_with(url="https://cdn/about.png")
        client.update_section.assert_awaited_once_with("sec-about", {
            "title": "About us", "content": "Text", "image_url": "https://cdn/new.png",
        })
        assert notifications.active()[-1].message == "About section updated successfully!"

    async def test_failure(self, page, client, notifications):
        client.update_section.side_effect = ContentApiError(500, "boom")
        result = await page.submit_section(SectionForm(title="About us"))
        assert not result.ok
        assert notifications.active()[-1].message == "Failed to update about section"
