"""
FastAPI application entry point for the portfolio backend.
"""

from __future__ import annotations

import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from portfolio_api.config import get_settings
from portfolio_api.errors import PortfolioError, StoreError, ValidationError
from portfolio_api.routes import router

logger = logging.getLogger(__name__)


async def portfolio_error_handler(request: Request, exc: PortfolioError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.as_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected body on %s %s: %s", request.method, request.url.path, exc.errors())
    error = ValidationError("The request body is not valid.")
    return JSONResponse(status_code=error.status_code, content=error.as_dict())


async def unhandled_error_handler(request: Request, exc: Exception):
    logger.error(
        "Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc
    )
    error = StoreError()
    return JSONResponse(status_code=error.status_code, content=error.as_dict())


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(title="Portfolio Backend (FastAPI)", version="0.1.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=settings.cors_methods,
        allow_headers=["*"],
    )
    app.add_exception_handler(PortfolioError, portfolio_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
    app.include_router(router)
    return app


app = create_app()


def main() -> None:
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    logger.info("Server listening on port %s", settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
