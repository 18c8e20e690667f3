"""AWS Lambda entry points.

The store, dispatcher and event loop are module-level so warm
invocations reuse the connection pool instead of reconnecting.
"""

import asyncio

from content_service.api.dispatcher import Dispatcher
from content_service.api.responses import event_method, preflight, server_error, success
from content_service.config.settings import get_settings
from content_service.logging.structured import get_logger, setup_logging
from content_service.store.database import ContentStore

setup_logging()
logger = get_logger("lambda")

store = ContentStore.from_settings(get_settings())
dispatcher = Dispatcher(store)
_loop = asyncio.new_event_loop()


def handler(event, context):
    """Public and admin content API (API Gateway proxy integration)."""
    return _loop.run_until_complete(dispatcher.dispatch(event))


def internal_handler(event, context):
    """Service-to-service read: every active content entity, whatever the path."""
    if event_method(event) == "OPTIONS":
        return preflight().to_lambda()
    return _loop.run_until_complete(_all_content())


async def _all_content() -> dict:
    try:
        await store.open()
        data = await dispatcher.controller.service.get_all_content()
    except Exception as e:
        logger.exception("Internal content fetch failed")
        return server_error("Internal server error", e).to_lambda()
    return success(data).to_lambda()
