"""Content API: FastAPI application for local development.

Every request is converted to an API Gateway (HTTP API v2) event and
handed to the same Dispatcher the Lambda handler uses, so routing,
envelopes and CORS behave identically on a laptop.
"""

import base64
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response

from content_service.api.dispatcher import Dispatcher
from content_service.config.settings import get_settings
from content_service.logging.structured import get_logger, setup_logging
from content_service.store.database import ContentStore

VERSION = "0.3.0"


def create_app(dispatcher: Dispatcher | None = None) -> FastAPI:
    if dispatcher is None:
        dispatcher = Dispatcher(ContentStore.from_settings(get_settings()))

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown lifecycle hooks."""
        setup_logging()
        get_logger().info("Content API started")
        yield
        await dispatcher.store.close()
        get_logger().info("Content API stopped")

    app = FastAPI(
        title="Content API",
        description="Content management backend for the marketing site",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.dispatcher = dispatcher

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": VERSION}

    @app.api_route("/{path:path}", methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"])
    async def proxy(request: Request, path: str):
        event = await request_to_event(request)
        result = await dispatcher.dispatch(event)
        return Response(
            content=result["body"],
            status_code=result["statusCode"],
            headers=result["headers"],
        )

    return app


async def request_to_event(request: Request) -> dict:
    """Build an HTTP API v2 proxy event from an incoming request."""
    raw = await request.body()
    try:
        body, is_base64 = raw.decode("utf-8"), False
    except UnicodeDecodeError:
        body, is_base64 = base64.b64encode(raw).decode("ascii"), True
    return {
        "version": "2.0",
        "rawPath": request.url.path,
        "headers": dict(request.headers),
        "queryStringParameters": dict(request.query_params) or None,
        "requestContext": {
            "http": {"method": request.method, "path": request.url.path},
        },
        "body": body or None,
        "isBase64Encoded": is_base64,
    }


app = create_app()
