from .detection_scheduler import DetectionScheduler, SchedulerState, SchedulerStats, TickReport

__all__ = ["DetectionScheduler", "SchedulerState", "SchedulerStats", "TickReport"]
