from .timestamps import (
    CreateTimestampRequest,
    PublicKeyResponse,
    TimestampResponse,
    VerifyTimestampRequest,
    VerifyTimestampResponse,
    build_timestamps_router,
)

__all__ = [
    "CreateTimestampRequest",
    "PublicKeyResponse",
    "TimestampResponse",
    "VerifyTimestampRequest",
    "VerifyTimestampResponse",
    "build_timestamps_router",
]
