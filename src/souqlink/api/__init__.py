"""SouqLink API package."""

from souqlink.api.errors import register_error_handlers
from souqlink.api.routes import (
    admin_router,
    auth_router,
    courier_router,
    order_router,
    product_router,
    user_router,
)

routers = [auth_router, user_router, product_router, order_router, courier_router, admin_router]

__all__ = [
    "admin_router",
    "auth_router",
    "courier_router",
    "order_router",
    "product_router",
    "register_error_handlers",
    "routers",
    "user_router",
]
