from .scheduler import Scheduler, scheduler

__all__ = ["Scheduler", "scheduler"]
