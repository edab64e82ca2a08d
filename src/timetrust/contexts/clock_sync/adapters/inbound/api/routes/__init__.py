from .clock import ClockNowResponse, build_clock_router

__all__ = [
    "ClockNowResponse",
    "build_clock_router",
]
