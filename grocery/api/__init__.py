# grocery/api/__init__.py
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from grocery.api.errors import register_exception_handlers
from grocery.api.routers import (
    addresses,
    auth,
    carts,
    customers,
    health,
    notifications,
    orders,
    products,
    users,
)
from grocery.utils.settings import FRONTEND_ORIGINS


def create_app() -> FastAPI:
    app = FastAPI(
        title="Grocery Store API",
        version="1.0.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=FRONTEND_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(addresses.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(customers.router)
    app.include_router(notifications.router)

    register_exception_handlers(app)
    return app
