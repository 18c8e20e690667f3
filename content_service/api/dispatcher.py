"""Lambda event dispatcher for the content API.

Pipeline: CORS preflight -> open store -> normalize path -> route ->
controller -> envelope. Any uncaught error becomes a 500 envelope; the
dispatcher itself never raises.
"""

from content_service.api.controller import ContentController
from content_service.api.responses import (
    ApiRequest,
    ApiResponse,
    endpoint_not_found,
    event_method,
    event_path,
    preflight,
    server_error,
)
from content_service.api.router import RouteTable, normalize_path
from content_service.config.settings import get_settings
from content_service.content.service import ContentService
from content_service.logging.structured import (
    RequestTimer,
    generate_request_id,
    get_logger,
    request_id_var,
)
from content_service.media.storage import S3MediaStorage
from content_service.store.database import ContentStore

logger = get_logger("dispatcher")


class Dispatcher:
    def __init__(
        self,
        store: ContentStore,
        controller: ContentController | None = None,
        routes: RouteTable | None = None,
        prefix: str | None = None,
    ):
        self.store = store
        self.controller = controller or ContentController(
            ContentService(store), S3MediaStorage.from_settings()
        )
        self.routes = routes or RouteTable()
        self.prefix = get_settings().route_prefix if prefix is None else prefix

    async def dispatch(self, event: dict) -> dict:
        """Handle one API Gateway proxy event and return the proxy result."""
        headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
        rid = headers.get("x-request-id") or generate_request_id()
        request_id_var.set(rid)

        method = event_method(event)
        if method == "OPTIONS":
            return preflight().to_lambda()

        path = normalize_path(event_path(event), self.prefix)
        route_name = None

        with RequestTimer() as timer:
            try:
                response, route_name = await self._handle(event, method, path)
            except Exception as e:
                logger.exception(
                    "Unhandled error",
                    extra={"log_data": {"method": method, "path": path}},
                )
                response = server_error("Internal server error", e)

        logger.info(
            "Request handled",
            extra={"log_data": {
                "method": method,
                "path": path,
                "route": route_name,
                "status": response.status_code,
                "latency_ms": timer.elapsed_ms,
            }},
        )
        response.headers["X-Request-Id"] = rid
        return response.to_lambda()

    async def _handle(self, event: dict, method: str, path: str) -> tuple[ApiResponse, str | None]:
        await self.store.open()

        resolved = self.routes.resolve(method, path)
        if resolved is None:
            return endpoint_not_found(), None
        route, params = resolved

        request = ApiRequest.from_event(event, path)
        request.path_params = {**request.path_params, **params}

        handler = getattr(self.controller, route.handler)
        return await handler(request), route.handler
