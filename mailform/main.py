from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from . import __version__
from .config import validate_configuration
from .endpoints import ROUTERS
from .exceptions.contact import ContactError
from .logger import get_logger
from .settings import settings


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> AsyncIterator[None]:
    logger.info(f"Starting mailform v{__version__}")

    config = validate_configuration(settings, settings.site_domain or settings.host)
    if isinstance(config, ContactError):
        logger.error(f"Contact form is not usable: {config.message}")
    else:
        logger.info(
            f"Contact form for {config.site_name} ({config.site_domain}) delivers to {config.mailbox_email}, "
            f"captcha {'enabled' if config.captcha_enabled else 'disabled'}, "
            f"csrf check {'enabled' if config.check_csrf else 'disabled'}"
        )

    yield


def create_app() -> FastAPI:
    app = FastAPI(
        title="mailform",
        description="Contact form backend",
        version=__version__,
        root_path=settings.root_path,
        debug=settings.debug,
        lifespan=lifespan,
        openapi_tags=[{"name": name, "description": doc} for name, (_, doc) in ROUTERS.items()],
    )

    for router, _ in ROUTERS.values():
        app.include_router(router)

    return app


app = create_app()


if __name__ == "__main__":
    uvicorn.run("mailform.main:app", host=settings.host, port=settings.port, reload=settings.reload)
