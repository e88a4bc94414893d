from .receive import router as receive_router

__all__ = ["receive_router"]
