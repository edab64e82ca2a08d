from .round_time import round_to_seconds

__all__ = ["round_to_seconds"]
