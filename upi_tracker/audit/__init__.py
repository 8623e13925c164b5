"""Audit logging package."""

from upi_tracker.audit.logger import AuditLogger

__all__ = ["AuditLogger"]
