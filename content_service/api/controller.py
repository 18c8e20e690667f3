"""Endpoint handlers: one coroutine per route, each ApiRequest -> ApiResponse."""

import functools

from botocore.exceptions import BotoCoreError, ClientError
from sqlalchemy.exc import SQLAlchemyError

from content_service.api.responses import (
    ApiRequest,
    ApiResponse,
    InvalidBody,
    bad_request,
    created,
    not_found,
    server_error,
    success,
)
from content_service.content.service import ContentService
from content_service.errors import MediaError, ValidationFailed
from content_service.logging.structured import get_logger
from content_service.media.storage import S3MediaStorage

logger = get_logger("controller")


def handles(failure: str):
    """Map request and storage errors raised by a handler to error envelopes."""

    def decorator(func):
        @functools.wraps(func)
        async def wrapper(self, request: ApiRequest) -> ApiResponse:
            try:
                return await func(self, request)
            except InvalidBody as e:
                return bad_request(str(e))
            except ValidationFailed as e:
                return bad_request("Validation failed", e.errors)
            except MediaError as e:
                return bad_request(str(e))
            except (SQLAlchemyError, BotoCoreError, ClientError) as e:
                logger.error(failure, exc_info=True, extra={"log_data": {"path": request.path}})
                return server_error(failure, e)

        return wrapper

    return decorator


def _string_field_errors(body: dict, required=(), optional=()) -> list[dict]:
    """Field errors for missing required strings and non-string values."""
    errors = []
    for name in required:
        if not body.get(name):
            errors.append({"field": name, "message": "Field required"})
        elif not isinstance(body[name], str):
            errors.append({"field": name, "message": "Input should be a valid string"})
    for name in optional:
        value = body.get(name)
        if value is not None and not isinstance(value, str):
            errors.append({"field": name, "message": "Input should be a valid string"})
    return errors


def _required_param(request: ApiRequest, name: str, message: str) -> tuple[str, ApiResponse | None]:
    value = request.path_params.get(name, "")
    if not value:
        return "", bad_request(message)
    return value, None


class ContentController:
    def __init__(self, service: ContentService, media: S3MediaStorage):
        self.service = service
        self.media = media

    # --- Reads ---

    @handles("Failed to fetch content")
    async def get_all_content(self, request: ApiRequest) -> ApiResponse:
        return success(await self.service.get_all_content())

    @handles("Failed to fetch section content")
    async def get_content_by_section(self, request: ApiRequest) -> ApiResponse:
        key, error = _required_param(request, "section_key", "Section key is required")
        if error:
            return error
        return success(await self.service.get_content_by_section(key))

    @handles("Failed to fetch admin content")
    async def get_all_content_for_admin(self, request: ApiRequest) -> ApiResponse:
        return success(await self.service.get_all_content_for_admin())

    # --- Content sections ---

    @handles("Failed to create content section")
    async def create_content_section(self, request: ApiRequest) -> ApiResponse:
        section = await self.service.create_content_section(request.json())
        return created(section, "Content section created successfully")

    @handles("Failed to update content section")
    async def update_content_section(self, request: ApiRequest) -> ApiResponse:
        section_id, error = _required_param(request, "id", "Section ID is required")
        if error:
            return error
        section = await self.service.update_content_section(section_id, request.json())
        if section is None:
            return not_found("Content section not found")
        return success(section, "Content section updated successfully")

    @handles("Failed to delete content section")
    async def delete_content_section(self, request: ApiRequest) -> ApiResponse:
        section_id, error = _required_param(request, "id", "Section ID is required")
        if error:
            return error
        if not await self.service.delete_content_section(section_id):
            return not_found("Content section not found")
        return success(message="Content section deleted successfully")

    # --- Content items ---

    @handles("Failed to create content item")
    async def create_content_item(self, request: ApiRequest) -> ApiResponse:
        item = await self.service.create_content_item(request.json())
        return created(item, "Content item created successfully")

    @handles("Failed to update content item")
    async def update_content_item(self, request: ApiRequest) -> ApiResponse:
        item_id, error = _required_param(request, "id", "Item ID is required")
        if error:
            return error
        item = await self.service.update_content_item(item_id, request.json())
        if item is None:
            return not_found("Content item not found")
        return success(item, "Content item updated successfully")

    @handles("Failed to delete content item")
    async def delete_content_item(self, request: ApiRequest) -> ApiResponse:
        item_id, error = _required_param(request, "id", "Item ID is required")
        if error:
            return error
        if not await self.service.delete_content_item(item_id):
            return not_found("Content item not found")
        return success(message="Content item deleted successfully")

    # --- Testimonials ---

    @handles("Failed to create testimonial")
    async def create_testimonial(self, request: ApiRequest) -> ApiResponse:
        testimonial = await self.service.create_testimonial(request.json())
        return created(testimonial, "Testimonial created successfully")

    @handles("Failed to update testimonial")
    async def update_testimonial(self, request: ApiRequest) -> ApiResponse:
        testimonial_id, error = _required_param(request, "id", "Testimonial ID is required")
        if error:
            return error
        testimonial = await self.service.update_testimonial(testimonial_id, request.json())
        if testimonial is None:
            return not_found("Testimonial not found")
        return success(testimonial, "Testimonial updated successfully")

    @handles("Failed to delete testimonial")
    async def delete_testimonial(self, request: ApiRequest) -> ApiResponse:
        testimonial_id, error = _required_param(request, "id", "Testimonial ID is required")
        if error:
            return error
        if not await self.service.delete_testimonial(testimonial_id):
            return not_found("Testimonial not found")
        return success(message="Testimonial deleted successfully")

    # --- FAQs ---

    @handles("Failed to create FAQ")
    async def create_faq(self, request: ApiRequest) -> ApiResponse:
        faq = await self.service.create_faq(request.json())
        return created(faq, "FAQ created successfully")

    @handles("Failed to update FAQ")
    async def update_faq(self, request: ApiRequest) -> ApiResponse:
        faq_id, error = _required_param(request, "id", "FAQ ID is required")
        if error:
            return error
        faq = await self.service.update_faq(faq_id, request.json())
        if faq is None:
            return not_found("FAQ not found")
        return success(faq, "FAQ updated successfully")

    @handles("Failed to delete FAQ")
    async def delete_faq(self, request: ApiRequest) -> ApiResponse:
        faq_id, error = _required_param(request, "id", "FAQ ID is required")
        if error:
            return error
        if not await self.service.delete_faq(faq_id):
            return not_found("FAQ not found")
        return success(message="FAQ deleted successfully")

    # --- Media ---

    @handles("Failed to upload image")
    async def upload_media(self, request: ApiRequest) -> ApiResponse:
        body = request.json()
        if not isinstance(body, dict):
            return bad_request("Request body must be a JSON object")
        errors = _string_field_errors(body, required=("file", "filename", "contentType"), optional=("folder",))
        if errors:
            return bad_request("Validation failed", errors)
        stored = await self.media.upload(
            body["file"],
            body["filename"],
            body["contentType"],
            folder=body.get("folder") or "uploads",
        )
        logger.info("Image uploaded", extra={"log_data": {"key": stored.key, "size": stored.size}})
        return created(stored.to_dict(), "Image uploaded successfully")

    @handles("Failed to delete image")
    async def delete_media(self, request: ApiRequest) -> ApiResponse:
        body = request.json()
        if not isinstance(body, dict):
            return bad_request("Request body must be a JSON object")
        errors = _string_field_errors(body, optional=("url", "key"))
        if errors:
            return bad_request("Validation failed", errors)
        key = await self.media.delete(url=body.get("url") or "", key=body.get("key") or "")
        logger.info("Image deleted", extra={"log_data": {"key": key}})
        return success({"key": key}, "Image deleted successfully")
