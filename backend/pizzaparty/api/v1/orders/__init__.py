"""Orders API package.

- order_routes: order creation, kitchen transitions and lookups
"""

from pizzaparty.api.v1.orders.order_routes import router

__all__ = ["router"]
