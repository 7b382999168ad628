"""Show logging."""

from turnbuckle.logging.show_log import LogEntry, ShowLog

__all__ = ["LogEntry", "ShowLog"]
