from .clock_offset_state import ClockOffsetState

__all__ = ["ClockOffsetState"]
