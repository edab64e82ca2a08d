from .timetrust_error import TIMETRUST_HTTP_STATUS_BY_CODE, CodedContextError, TimetrustError

__all__ = ["CodedContextError", "TIMETRUST_HTTP_STATUS_BY_CODE", "TimetrustError"]
