from .time_sig import TimeSig

__all__ = ["TimeSig"]
