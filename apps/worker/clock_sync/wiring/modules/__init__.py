from .clock_sync import ClockSyncMetrics, ClockSyncWorkerApp, build_clock_sync_worker_app

__all__ = [
    "ClockSyncMetrics",
    "ClockSyncWorkerApp",
    "build_clock_sync_worker_app",
]
