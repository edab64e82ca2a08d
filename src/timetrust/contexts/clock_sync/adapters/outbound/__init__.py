from .clients import (
    DaytimeProtocolClient,
    HttpDateHeaderClient,
    parse_daytime_response,
    parse_http_date,
)

__all__ = [
    "DaytimeProtocolClient",
    "HttpDateHeaderClient",
    "parse_daytime_response",
    "parse_http_date",
]
