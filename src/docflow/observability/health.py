"""Health checks for the components DocFlow depends on."""

import os
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .logging_config import get_logger

logger = get_logger(__name__)


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    UNHEALTHY = "unhealthy"


@dataclass
class ComponentHealth:
    """Health status for a single component."""
    status: HealthStatus
    message: Optional[str] = None
    latency_ms: Optional[float] = None


def check_database_health(db: Session) -> ComponentHealth:
    """Run a trivial query against the database.

    Args:
        db: Database session

    Returns:
        ComponentHealth: Database health status
    """
    try:
        start = time.perf_counter()
        db.execute(text("SELECT 1"))
        latency_ms = (time.perf_counter() - start) * 1000
    except SQLAlchemyError as e:
        logger.error(f"Database health check failed: {e}", exc_info=True)
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            message=f"Database error: {e}"
        )

    return ComponentHealth(
        status=HealthStatus.HEALTHY,
        message="Database connection OK",
        latency_ms=round(latency_ms, 2)
    )


def check_upload_dir_health(upload_dir: str) -> ComponentHealth:
    """Check that uploaded files can be written to the upload directory."""
    if not os.path.isdir(upload_dir):
        # Created lazily on first upload
        parent = os.path.dirname(os.path.abspath(upload_dir))
        if os.access(parent, os.W_OK):
            return ComponentHealth(
                status=HealthStatus.HEALTHY,
                message="Upload directory will be created on first upload"
            )
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            message=f"Upload directory {upload_dir} does not exist and cannot be created"
        )

    if not os.access(upload_dir, os.W_OK):
        return ComponentHealth(
            status=HealthStatus.UNHEALTHY,
            message=f"Upload directory {upload_dir} is not writable"
        )

    return ComponentHealth(status=HealthStatus.HEALTHY, message="Upload directory OK")


def get_overall_health(components: Dict[str, ComponentHealth]) -> HealthStatus:
    if any(c.status == HealthStatus.UNHEALTHY for c in components.values()):
        return HealthStatus.UNHEALTHY
    return HealthStatus.HEALTHY
