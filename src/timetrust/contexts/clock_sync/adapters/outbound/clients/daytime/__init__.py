from .daytime_protocol_client import DaytimeProtocolClient, parse_daytime_response

__all__ = ["DaytimeProtocolClient", "parse_daytime_response"]
