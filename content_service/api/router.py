"""Route table for the content API.

Routes are evaluated in list order and the first match wins. Literal
paths are listed ahead of parameterized paths that share their root
segment, so "/sections" never falls through to "/sections/{id}".
A "{name}" placeholder matches exactly one path segment.
"""

import re
from dataclasses import dataclass, field

_PLACEHOLDER = re.compile(r"\{(\w+)\}")


@dataclass(frozen=True)
class Route:
    method: str
    pattern: str
    handler: str  # controller method name
    _regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "_regex", _compile(self.pattern))

    @property
    def is_literal(self) -> bool:
        return _PLACEHOLDER.search(self.pattern) is None

    @property
    def root(self) -> str:
        return self.pattern.strip("/").split("/", 1)[0]

    def match(self, method: str, path: str) -> dict[str, str] | None:
        """Path parameters if this route serves (method, path), else None."""
        if method != self.method:
            return None
        m = self._regex.match(path)
        return m.groupdict() if m else None


def _compile(pattern: str) -> re.Pattern:
    parts = []
    for segment in pattern.strip("/").split("/"):
        placeholder = _PLACEHOLDER.fullmatch(segment)
        if placeholder:
            parts.append(f"(?P<{placeholder.group(1)}>[^/]+)")
        else:
            parts.append(re.escape(segment))
    return re.compile("^/" + "/".join(parts) + "$")


ROUTES: list[Route] = [
    # Public
    Route("GET", "/", "get_all_content"),
    Route("GET", "/section/{section_key}", "get_content_by_section"),
    # Admin
    Route("GET", "/admin", "get_all_content_for_admin"),
    # Content sections
    Route("POST", "/sections", "create_content_section"),
    Route("PUT", "/sections/{id}", "update_content_section"),
    Route("DELETE", "/sections/{id}", "delete_content_section"),
    # Content items
    Route("POST", "/items", "create_content_item"),
    Route("PUT", "/items/{id}", "update_content_item"),
    Route("DELETE", "/items/{id}", "delete_content_item"),
    # Testimonials
    Route("POST", "/testimonials", "create_testimonial"),
    Route("PUT", "/testimonials/{id}", "update_testimonial"),
    Route("DELETE", "/testimonials/{id}", "delete_testimonial"),
    # FAQs
    Route("POST", "/faqs", "create_faq"),
    Route("PUT", "/faqs/{id}", "update_faq"),
    Route("DELETE", "/faqs/{id}", "delete_faq"),
    # Media
    Route("POST", "/media/upload", "upload_media"),
    Route("POST", "/media/delete", "delete_media"),
]


class RouteTable:
    def __init__(self, routes: list[Route] | None = None):
        self.routes = list(ROUTES if routes is None else routes)

    def resolve(self, method: str, path: str) -> tuple[Route, dict[str, str]] | None:
        for route in self.routes:
            params = route.match(method, path)
            if params is not None:
                return route, params
        return None


def normalize_path(raw_path: str, prefix: str = "") -> str:
    """Strip the service prefix and trailing slashes; "" becomes "/"."""
    path = raw_path or ""
    prefix = prefix.rstrip("/")
    if prefix and (path == prefix or path.startswith(prefix + "/")):
        path = path[len(prefix):]
    path = "/" + path.strip("/")
    return path
