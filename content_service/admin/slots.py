"""Fixed-slot editing of a section's ordered items.

An admin page shows a fixed number of slots (for example four feature
boxes on the about page). Each slot stands for one display_order value
of the section's items. On load, items are bound to slots by their
display_order and the binding is kept as a slot -> item id table;
saves go through that table. Slot identity itself is not stored: the
next load rebuilds the table from display_order.
"""

from dataclasses import dataclass, field
from typing import Any

from content_service.admin.client import ContentApiClient
from content_service.admin.media import ImageFile, MediaUploader
from content_service.admin.notifications import NotificationCenter
from content_service.errors import ContentApiError, MediaError
from content_service.logging.structured import get_logger

logger = get_logger("admin")


@dataclass(frozen=True)
class SlotLayout:
    section_key: str
    label: str = "Feature box"
    orders: tuple[int, ...] = (1, 2, 3, 4)
    folder: str = "uploads"

    def number_for(self, display_order: Any) -> int | None:
        """Slot number (1-based) showing items with this display_order."""
        for number, order in enumerate(self.orders, start=1):
            if order == display_order:
                return number
        return None


@dataclass
class Slot:
    number: int
    display_order: int
    item: dict | None = None
    shadowed: list[str] = field(default_factory=list)

    @property
    def item_id(self) -> str | None:
        return self.item["id"] if self.item else None

    @property
    def image_url(self) -> str | None:
        return self.item.get("image_url") if self.item else None


@dataclass
class SlotForm:
    title: str
    description: str | None = None
    link_url: str | None = None
    metadata: dict | None = None
    image: ImageFile | None = None

    def fields(self) -> dict:
        data = {"title": self.title, "description": self.description, "link_url": self.link_url}
        if self.metadata is not None:
            data["metadata"] = self.metadata
        return data


@dataclass
class SectionForm:
    title: str
    content: str | None = None
    metadata: dict | None = None
    image: ImageFile | None = None

    def fields(self) -> dict:
        data = {"title": self.title, "content": self.content}
        if self.metadata is not None:
            data["metadata"] = self.metadata
        return data


@dataclass
class SlotSaveResult:
    slot: int
    ok: bool
    item: dict | None = None
    error: str | None = None
    cleanup_error: str | None = None  # old image could not be removed; the save still stands


def assign_slots(items: list[dict], layout: SlotLayout) -> dict[int, Slot]:
    """Bind items to slots by display_order.

    `items` must be in listing order (display_order, then newest first);
    when several items share a slot's order the first one wins and the
    rest are recorded as shadowed.
    """
    slots = {
        number: Slot(number, order)
        for number, order in enumerate(layout.orders, start=1)
    }
    for item in items:
        number = layout.number_for(item.get("display_order"))
        if number is None:
            continue
        slot = slots[number]
        if slot.item is None:
            slot.item = item
        else:
            slot.shadowed.append(item["id"])

    for slot in slots.values():
        if slot.shadowed:
            logger.warning(
                "Items shadowed in slot",
                extra={"log_data": {
                    "section": layout.section_key,
                    "slot": slot.number,
                    "bound_item": slot.item_id,
                    "shadowed_items": slot.shadowed,
                }},
            )
    return slots


class OrderedContentPage:
    """Admin page state for one section and its slots."""

    def __init__(
        self,
        client: ContentApiClient,
        layout: SlotLayout,
        notifications: NotificationCenter | None = None,
        uploader: MediaUploader | None = None,
    ):
        self.client = client
        self.layout = layout
        self.notifications = notifications or NotificationCenter()
        self.uploader = uploader or MediaUploader(client)
        self.section: dict | None = None
        self._slots: dict[int, Slot] = {}

    async def load(self) -> None:
        """Fetch admin content and rebuild the slot table."""
        content = await self.client.get_admin_content()
        matches = [s for s in content.get("sections", []) if s.get("key") == self.layout.section_key]
        # Keys are not unique; an active section beats inactive copies
        self.section = next((s for s in matches if s.get("is_active", True)), None)
        if self.section is None and matches:
            self.section = matches[0]
        items = []
        if self.section is not None:
            items = [i for i in content.get("items", []) if i.get("section_id") == self.section["id"]]
        self._slots = assign_slots(items, self.layout)

    def slots(self) -> list[Slot]:
        return [self._slots[n] for n in sorted(self._slots)]

    @property
    def mapping(self) -> dict[int, str | None]:
        return {n: slot.item_id for n, slot in self._slots.items()}

    async def submit_slot(self, number: int, form: SlotForm) -> SlotSaveResult:
        slot = self._slot(number)
        label = f"{self.layout.label} {number}"
        failure = f"Failed to update {label.lower()}"

        if self.section is None:
            self.notifications.error(failure)
            return SlotSaveResult(number, False, error=f"Section '{self.layout.section_key}' not found")

        data = form.fields()
        result = SlotSaveResult(number, False)

        if form.image is not None:
            try:
                data["image_url"] = await self.uploader.upload(form.image, self.layout.folder)
            except MediaError as e:
                logger.warning(failure, extra={"log_data": {"slot": number, "error": str(e)}})
                self.notifications.error(failure)
                result.error = str(e)
                return result
            if slot.image_url:
                result.cleanup_error = await self._remove_image(slot.image_url)

        try:
            if slot.item_id:
                result.item = await self.client.update_item(slot.item_id, data)
            else:
                result.item = await self.client.create_item({
                    **data,
                    "section_id": self.section["id"],
                    "display_order": slot.display_order,
                    "is_active": True,
                })
        except ContentApiError as e:
            logger.warning(failure, extra={"log_data": {"slot": number, "error": str(e)}})
            self.notifications.error(failure)
            result.error = str(e)
            return result

        result.ok = True
        self.notifications.success(f"{label} updated successfully!")
        await self._reload()
        return result

    async def remove_slot_image(self, number: int) -> SlotSaveResult:
        """Delete the slot's image and clear image_url on its item."""
        slot = self._slot(number)
        label = f"{self.layout.label} {number}"
        if not slot.item or not slot.image_url:
            return SlotSaveResult(number, False, error="No image to remove")

        result = SlotSaveResult(number, False)
        result.cleanup_error = await self._remove_image(slot.image_url)
        try:
            result.item = await self.client.update_item(
                slot.item_id, {"title": slot.item["title"], "image_url": None}
            )
        except ContentApiError as e:
            self.notifications.error(f"Failed to remove image from {label.lower()}")
            result.error = str(e)
            return result

        result.ok = True
        self.notifications.success(f"Image removed from {label.lower()}")
        await self._reload()
        return result

    async def submit_section(self, form: SectionForm) -> SlotSaveResult:
        """Save the section's own fields; slot 0 in the result."""
        name = self.layout.section_key.capitalize()
        failure = f"Failed to update {self.layout.section_key} section"
        if self.section is None:
            self.notifications.error(failure)
            return SlotSaveResult(0, False, error=f"Section '{self.layout.section_key}' not found")

        data = form.fields()
        result = SlotSaveResult(0, False)

        if form.image is not None:
            try:
                data["image_url"] = await self.uploader.upload(form.image, self.layout.folder)
            except MediaError as e:
                self.notifications.error(failure)
                result.error = str(e)
                return result
            if self.section.get("image_url"):
                result.cleanup_error = await self._remove_image(self.section["image_url"])

        try:
            result.item = await self.client.update_section(self.section["id"], data)
        except ContentApiError as e:
            self.notifications.error(failure)
            result.error = str(e)
            return result

        result.ok = True
        self.notifications.success(f"{name} section updated successfully!")
        await self._reload()
        return result

    def _slot(self, number: int) -> Slot:
        try:
            return self._slots[number]
        except KeyError:
            raise ValueError(f"No slot {number} in layout for '{self.layout.section_key}'") from None

    async def _remove_image(self, url: str) -> str | None:
        """Best-effort delete; returns the error text instead of raising."""
        try:
            await self.uploader.delete(url)
        except MediaError as e:
            logger.warning("Old image cleanup failed", extra={"log_data": {"url": url, "error": str(e)}})
            return str(e)
        return None

    async def _reload(self) -> None:
        try:
            await self.load()
        except ContentApiError as e:
            logger.warning("Reload after save failed", extra={"log_data": {"error": str(e)}})
            self.notifications.error("Saved, but the page could not be refreshed")
