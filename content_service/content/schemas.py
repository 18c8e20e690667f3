"""Request payload schemas for content writes.

Create schemas carry defaults for optional fields. Update schemas require
the entity's display fields and leave everything else unset unless the
body provides it, so updates only touch what was sent.
"""

from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError

from content_service.errors import ValidationFailed

_NOT_NULL = {"key", "section_id", "metadata", "is_active", "display_order"}


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("must not be blank")
    return value


# Stored exactly as sent; only all-whitespace values are rejected
RequiredText = Annotated[str, AfterValidator(_not_blank)]


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore")


class ContentSectionCreate(_Payload):
    key: RequiredText = Field(min_length=1, max_length=100)
    title: RequiredText = Field(min_length=1, max_length=255)
    content: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    display_order: int = 0
    image_url: str | None = None


class ContentSectionUpdate(_Payload):
    title: RequiredText = Field(min_length=1, max_length=255)
    key: RequiredText | None = Field(default=None, min_length=1, max_length=100)
    content: str | None = None
    metadata: dict[str, Any] | None = None
    is_active: bool | None = None
    display_order: int | None = None
    image_url: str | None = None


class ContentItemCreate(_Payload):
    section_id: RequiredText = Field(min_length=1)
    title: RequiredText = Field(min_length=1, max_length=255)
    description: str | None = None
    image_url: str | None = None
    link_url: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    is_active: bool = True
    display_order: int = 0


class ContentItemUpdate(_Payload):
    title: RequiredText = Field(min_length=1, max_length=255)
    section_id: RequiredText | None = Field(default=None, min_length=1)
    description: str | None = None
    image_url: str | None = None
    link_url: str | None = None
    metadata: dict[str, Any] | None = None
    is_active: bool | None = None
    display_order: int | None = None


class TestimonialCreate(_Payload):
    name: RequiredText = Field(min_length=1, max_length=255)
    content: RequiredText = Field(min_length=1)
    role: str | None = None
    company: str | None = None
    image_url: str | None = None
    rating: int | None = Field(default=None, ge=1, le=5)
    is_active: bool = True
    display_order: int = 0


class TestimonialUpdate(TestimonialCreate):
    is_active: bool | None = None
    display_order: int | None = None


class FAQCreate(_Payload):
    question: RequiredText = Field(min_length=1)
    answer: RequiredText = Field(min_length=1)
    category: str | None = None
    is_active: bool = True
    display_order: int = 0


class FAQUpdate(FAQCreate):
    is_active: bool | None = None
    display_order: int | None = None


def parse_payload(schema: type[BaseModel], body: Any, *, partial: bool = False) -> dict[str, Any]:
    """Validate `body` against `schema` and return the fields to write.

    With partial=True only fields present in the body are returned.
    Raises ValidationFailed with one entry per offending field.
    """
    if not isinstance(body, dict):
        raise ValidationFailed([{"field": "body", "message": "Request body must be a JSON object"}])
    try:
        payload = schema.model_validate(body)
    except ValidationError as e:
        raise ValidationFailed([_field_error(err) for err in e.errors()]) from e
    data = payload.model_dump(exclude_unset=partial)
    # An explicit null on a non-nullable column means "leave as is"
    return {k: v for k, v in data.items() if not (k in _NOT_NULL and v is None)}


def _field_error(err: dict) -> dict:
    field = ".".join(str(part) for part in err.get("loc", ())) or "body"
    return {"field": field, "message": err.get("msg", "Invalid value")}
