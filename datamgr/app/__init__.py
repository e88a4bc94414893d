"""
datamgr HTTP application.
"""

from .dispatcher import RouteDispatcher
from .main import create_app

__all__ = ["RouteDispatcher", "create_app"]
