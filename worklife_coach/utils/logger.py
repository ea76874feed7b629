"""
Structured Logger Module

Configures structlog for JSON-formatted structured logging with correlation IDs.
Every engine and the conversation layer log through this module so one
coaching turn can be traced by its session id.

Example Usage:
    from worklife_coach.utils.logger import get_logger

    logger = get_logger(
        correlation_id="session-7f3a",
        phase="recommendations",
        component="career_path_engine"
    )

    logger.info("Generated career paths", path_count=3, top_fit=0.82)
    logger.warning("Profile unavailable, using generic recommendations")
    logger.error("Engine failed", engine="skill_recommender", error="KeyError")

Log Levels:
    - DEBUG: Scoring details, per-candidate fit scores
    - INFO: Turn progress, sessions started/ended, recommendations produced
    - WARNING: Degraded responses, omitted recommendations, data store failures
    - ERROR: Exceptions caught at a component boundary
    - CRITICAL: Unrecoverable failures requiring operator intervention

User message text is personal data: log lengths and labels, never the text.
"""

import logging
import sys
import uuid
from pathlib import Path
from typing import Optional

import structlog
from structlog.types import BindableLogger, EventDict, WrappedLogger

SENSITIVE_FIELDS = {"password", "api_key", "token", "secret", "credential", "auth", "email"}
PERSONAL_TEXT_FIELDS = {"message_text", "user_message", "content"}


def mask_sensitive_fields(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """
    Processor to mask credentials and free-text user content in log output.

    Args:
        logger: Logger instance
        method_name: Logging method name
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with masked values

    Masks:
        - password, api_key, token, secret, credential, auth, email fields
          (exact or underscore/hyphen-separated match) -> "***MASKED***"
        - message_text, user_message, content fields -> "***REDACTED (N chars)***"
    """
    for key in list(event_dict.keys()):
        key_lower = key.lower()

        if key_lower in PERSONAL_TEXT_FIELDS and isinstance(event_dict[key], str):
            event_dict[key] = f"***REDACTED ({len(event_dict[key])} chars)***"
            continue

        for sensitive in SENSITIVE_FIELDS:
            if (
                key_lower == sensitive
                or key_lower.endswith(f"_{sensitive}")
                or key_lower.endswith(f"-{sensitive}")
                or key_lower.startswith(f"{sensitive}_")
                or key_lower.startswith(f"{sensitive}-")
            ):
                event_dict[key] = "***MASKED***"
                break

    return event_dict


def configure_logging(
    log_file: Optional[str] = None, log_level: str = "INFO"
) -> None:
    """
    Configure structlog with JSON output to stdout and, optionally, a file.

    Args:
        log_file: Path to log file (None logs to stdout only)
        log_level: Logging level (default: "INFO")

    Log Format (JSON):
        {
            "timestamp": "2026-10-06T10:30:45Z",
            "level": "info",
            "correlation_id": "session-7f3a",
            "phase": "conversation",
            "component": "conversation_manager",
            "event": "Session started",
            "user_id": "user-42"
        }
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_path))

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, log_level.upper()),
        handlers=handlers,
        force=True,
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            mask_sensitive_fields,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(
    correlation_id: Optional[str] = None,
    phase: Optional[str] = None,
    component: Optional[str] = None,
) -> BindableLogger:
    """
    Get structured logger with bound context.

    Args:
        correlation_id: Session id or other request id (generates UUID if not provided)
        phase: Processing phase (e.g., "intent", "recommendations", "conversation")
        component: Component name (e.g., "skill_recommender", "data_store")

    Returns:
        BoundLogger with correlation_id, phase, and component bound to context
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())

    logger = structlog.get_logger()

    if correlation_id:
        logger = logger.bind(correlation_id=correlation_id)
    if phase:
        logger = logger.bind(phase=phase)
    if component:
        logger = logger.bind(component=component)

    return logger


# Initialize logging on module import with default settings
configure_logging()
