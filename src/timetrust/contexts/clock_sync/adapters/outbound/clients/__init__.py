from .daytime import DaytimeProtocolClient, parse_daytime_response
from .http_date import HttpDateHeaderClient, parse_http_date

__all__ = [
    "DaytimeProtocolClient",
    "HttpDateHeaderClient",
    "parse_daytime_response",
    "parse_http_date",
]
