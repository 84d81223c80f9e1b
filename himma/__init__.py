"""Himma -- role-scoped notification and alerting core for the work-tracking dashboard."""

__version__ = "0.1.0"
