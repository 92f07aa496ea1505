"""ASGI application entrypoint (`uvicorn freightmatch.main:app`)."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError

from freightmatch.api.v1._errors import domain_error_handler, request_validation_handler
from freightmatch.api.v1.router import get_api_router
from freightmatch.core.config import get_config
from freightmatch.core.exceptions import FreightMatchException
from freightmatch.core.startup import bootstrap


@asynccontextmanager
async def lifespan(app: FastAPI):
    bootstrap()
    yield


def create_app() -> FastAPI:
    cfg = get_config()
    app = FastAPI(title=cfg.APP_NAME, version=cfg.APP_VERSION, lifespan=lifespan)
    app.include_router(get_api_router())
    app.add_exception_handler(FreightMatchException, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    @app.get("/")
    def root() -> dict:
        return {"service": cfg.APP_NAME, "version": cfg.APP_VERSION, "api_prefix": cfg.API_PREFIX}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    cfg = get_config()
    uvicorn.run("freightmatch.main:app", host=cfg.API_HOST, port=cfg.API_PORT)
