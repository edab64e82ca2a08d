from .http_date_client import HttpDateHeaderClient, parse_http_date

__all__ = ["HttpDateHeaderClient", "parse_http_date"]
