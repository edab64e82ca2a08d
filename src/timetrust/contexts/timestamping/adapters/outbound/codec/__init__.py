from .time_sig_token_codec import TimeSigDecodeError, decode_time_sig, encode_time_sig

__all__ = [
    "TimeSigDecodeError",
    "decode_time_sig",
    "encode_time_sig",
]
