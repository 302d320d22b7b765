"""Structured audit logging for mutating control-plane operations."""

import logging
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional

from anchor_client.utils.logging import get_logger

REDACTED = "***REDACTED***"

# Substrings marking a detail key as sensitive (registry credentials etc.)
SENSITIVE_KEY_PARTS = frozenset({"password", "token", "secret", "auth", "credentials", "private"})


class AuditEventType(str, Enum):
    """Types of audit events, named ``<resource>_<action>``."""

    # Container events
    CONTAINER_START = "container_start"
    CONTAINER_STOP = "container_stop"
    CONTAINER_RESTART = "container_restart"
    CONTAINER_REMOVE = "container_remove"

    # Image events
    IMAGE_PULL = "image_pull"
    IMAGE_BUILD = "image_build"
    IMAGE_REMOVE = "image_remove"
    IMAGE_PRUNE = "image_prune"

    # Volume events
    VOLUME_CREATE = "volume_create"
    VOLUME_REMOVE = "volume_remove"
    VOLUME_PRUNE = "volume_prune"

    # System events
    SYSTEM_PRUNE = "system_prune"
    SYSTEM_CLEANUP = "system_cleanup"

    @property
    def resource(self) -> str:
        return self.value.split("_", 1)[0]


def redact(value: Any) -> Any:
    """
    Redact sensitive keys in nested detail structures.

    Args:
        value: Dict, list or scalar detail value

    Returns:
        Copy of ``value`` with the values of sensitive keys replaced
    """
    if isinstance(value, dict):
        return {
            key: REDACTED
            if any(part in str(key).lower() for part in SENSITIVE_KEY_PARTS)
            else redact(item)
            for key, item in value.items()
        }
    if isinstance(value, (list, tuple)):
        return [redact(item) for item in value]
    return value


class AuditLogger:
    """Emits one ``audit_event`` record per mutating operation."""

    def __init__(self):
        self._logger = get_logger("anchor_client.audit")
        # Audit events are always emitted regardless of the root level
        self._logger.setLevel(logging.INFO)

    def log_event(
        self,
        event_type: AuditEventType,
        resource_id: Optional[str] = None,
        success: Optional[bool] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Log an audit event.

        Args:
            event_type: Type of event being logged
            resource_id: ID or name of the affected resource
            success: Outcome of the operation if known
            details: Additional event-specific details, redacted before logging
        """
        event: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event_type": event_type.value,
            "resource": event_type.resource,
        }
        if resource_id:
            event["resource_id"] = resource_id
        if success is not None:
            event["success"] = success
        if details:
            event["details"] = redact(details)

        level = logging.INFO if success is not False else logging.WARNING
        self._logger.log(level, "audit_event", extra=event)


# Global audit logger instance
_audit_logger: Optional[AuditLogger] = None


def get_audit_logger() -> AuditLogger:
    """
    Get the global audit logger instance.

    Returns:
        AuditLogger instance
    """
    global _audit_logger
    if _audit_logger is None:
        _audit_logger = AuditLogger()
    return _audit_logger
