"""
Routers Package
"""

from trmnl_byos.routers.devices import router as devices_router
from trmnl_byos.routers.screens import router as screens_router

__all__ = [
    "devices_router",
    "screens_router",
]
