# storefront/api/__init__.py
from fastapi import FastAPI

from storefront.api.routers import carts, health, session, wishlist


def include_routers(app: FastAPI) -> FastAPI:
    app.include_router(health.router)
    app.include_router(session.router)
    app.include_router(carts.router)
    app.include_router(wishlist.router)
    return app
