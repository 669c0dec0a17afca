# app/api/__init__.py
from fastapi import FastAPI

from app.api.routers import health, users, products, categories, reviews, carts, orders


def register_routers(app: FastAPI) -> None:
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(products.router)
    app.include_router(categories.router)
    app.include_router(reviews.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
