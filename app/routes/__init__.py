from .schedule import schedule_bp

__all__ = ["schedule_bp"]
