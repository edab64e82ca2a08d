from .requests_timestamp_authority import (
    RequestsTimestampAuthority,
    RequestsTimestampAuthorityConfig,
    parse_authority_payload,
)

__all__ = [
    "RequestsTimestampAuthority",
    "RequestsTimestampAuthorityConfig",
    "parse_authority_payload",
]
