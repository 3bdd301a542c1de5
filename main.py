from dishka import AsyncContainer
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from pydantic import ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from dishka.integrations.fastapi import setup_dishka

from core.container import container
from core.exception_handler import (
    validation_exception_handler,
    entity_validation_exception_handler,
    http_exception_handler,
    starlette_exception_handler,
    custom_exception_handler
)
from core.exceptions import BaseCustomException
from wallet.router import router as wallet_router

APP_NAME = "EVM Wallet Service"
APP_VERSION = "0.1.0"


def create_app(app_container: AsyncContainer) -> FastAPI:
    """
    Build the HTTP application around a dependency container.

    Parameters
    ----------
    app_container : AsyncContainer
        Container providing the wallet components

    Returns
    -------
    FastAPI
        Configured application
    """
    application = FastAPI(
        title=APP_NAME,
        version=APP_VERSION,
        description="Account registry, balances and ERC-20 transfers for EVM networks",
    )

    setup_dishka(app_container, application)

    application.add_exception_handler(RequestValidationError, validation_exception_handler)
    application.add_exception_handler(ValidationError, entity_validation_exception_handler)
    application.add_exception_handler(HTTPException, http_exception_handler)
    application.add_exception_handler(StarletteHTTPException, starlette_exception_handler)
    application.add_exception_handler(BaseCustomException, custom_exception_handler)
    application.add_exception_handler(Exception, custom_exception_handler)

    application.include_router(wallet_router)

    @application.get("/")
    async def root():
        """
        Root endpoint.

        Returns
        -------
        dict
            Application information
        """
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "endpoints": {
                "network": "/api/network",
                "accounts": "/api/accounts",
                "balances": "/api/balances",
                "tokens": "/api/tokens",
                "transfers": "/api/transfers",
                "docs": "/docs"
            }
        }

    @application.get("/health")
    async def health():
        return {"status": "healthy", "version": APP_VERSION}

    return application


app = create_app(container)
