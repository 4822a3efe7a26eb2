"""
MakerSet Cart Module

This package contains the cart core of the MakerSet shop client:
- db: Durable key-value store client (Upstash Redis)
- cart: Single-provider cart store, persistence and checkout
- services: REST backend client, settings lookup, money helpers
- models: Pydantic schemas for backend payloads

Note: Imports are lazy so the HTTP and Redis clients are not
pulled in at module load time.
"""

# Lazy imports to avoid issues at module load time
__all__ = [
    "CartStore",
    "create_cart_store",
    "MakerSetApi",
    "get_redis",
]


def __getattr__(name):
    """Lazy attribute access."""
    if name == "CartStore":
        from makerset.cart.service import CartStore
        return CartStore
    elif name == "create_cart_store":
        from makerset.cart.service import create_cart_store
        return create_cart_store
    elif name == "MakerSetApi":
        from makerset.services.api import MakerSetApi
        return MakerSetApi
    elif name == "get_redis":
        from makerset.db import get_redis
        return get_redis
    raise AttributeError(f"module 'makerset' has no attribute '{name}'")
