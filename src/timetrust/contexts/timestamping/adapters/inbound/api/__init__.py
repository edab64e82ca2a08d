from .routes import build_timestamps_router

__all__ = ["build_timestamps_router"]
