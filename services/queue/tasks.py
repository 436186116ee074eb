"""Async task definitions for order document rendering.

Uses arq (async Redis queue) for background task processing.
Renders an order confirmation and stores it as a background job, so API
callers are not held open while a headless browser is running.

Based on arq documentation:
https://arq-docs.helpmanual.io/
"""

import logging
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ValidationError

from services.documents.errors import DocumentError
from services.documents.renderer import DocumentRenderer
from services.documents.schema import DocumentRole, OrderDocumentRequest
from services.shared.config import Settings, get_settings

logger = logging.getLogger(__name__)


def job_key(job_id: str) -> str:
    """Redis key holding the status record of a job."""
    return f"job:{job_id}"


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


class JobResult(BaseModel):
    """Result of a background render job.

    Attributes:
        job_id: Unique job identifier
        status: Job status (pending, processing, completed, failed)
        order_number: Order being rendered
        role: Document role (seller or buyer)
        reference: Pre-signed URL or inline data URL (if completed)
        error: Error message (if failed)
        created_at: Job creation timestamp
        completed_at: Job completion timestamp
    """

    job_id: str
    status: str
    order_number: str
    role: DocumentRole
    reference: str | None = None
    error: str | None = None
    created_at: str
    completed_at: str | None = None


async def render_order_document(
    ctx: dict[str, Any],
    job_id: str,
    order: dict[str, Any],
    role: str,
) -> dict[str, Any]:
    """Render an order confirmation and store it.

    Args:
        ctx: arq context (contains redis connection)
        job_id: Unique job identifier
        order: Order payload, validated into an OrderDocumentRequest
        role: Document role value ("seller" or "buyer")

    Returns:
        JobResult as dict
    """
    logger.info(f"Rendering {role} document for job {job_id}")

    settings: Settings = ctx.get("settings") or get_settings()
    renderer: DocumentRenderer = ctx.get("renderer") or DocumentRenderer(settings)
    redis = ctx["redis"]
    ttl = settings.job_result_ttl_seconds

    order_number = order.get("order_number") or order.get("orderNumber") or order.get("orderNo")
    result = JobResult(
        job_id=job_id,
        status="processing",
        order_number=str(order_number or ""),
        role=DocumentRole(role),
        created_at=utc_now(),
    )
    await redis.set(job_key(job_id), result.model_dump_json(), ex=ttl)

    try:
        request = OrderDocumentRequest.model_validate(order)
        result.order_number = request.order_number
        result.reference = await renderer.render_and_store(request, result.role)
        result.status = "completed"
    except ValidationError as e:
        logger.error(f"Job {job_id} received an invalid order: {e}")
        result.status = "failed"
        result.error = f"Invalid order data: {e.error_count()} validation error(s)"
    except DocumentError as e:
        logger.error(f"Job {job_id} failed: {e}")
        result.status = "failed"
        result.error = str(e)
    except Exception as e:
        logger.exception(f"Job {job_id} failed with unexpected error: {e}")
        result.status = "failed"
        result.error = str(e)

    result.completed_at = utc_now()
    await redis.set(job_key(job_id), result.model_dump_json(), ex=ttl)
    logger.info(f"Job {job_id} completed with status: {result.status}")

    return result.model_dump(mode="json")


async def startup(ctx: dict[str, Any]) -> None:
    """Worker startup hook - initialize services.

    Called once when worker starts. The renderer is shared by all jobs;
    every render still launches its own browser.
    """
    logger.info("Initializing worker services...")
    settings = get_settings()
    ctx["settings"] = settings
    ctx["renderer"] = DocumentRenderer(settings)
    logger.info("Worker services initialized")


async def shutdown(ctx: dict[str, Any]) -> None:
    """Worker shutdown hook - cleanup resources."""
    logger.info("Worker shutting down...")


class WorkerSettings:
    """arq worker settings.

    Defines the worker configuration including:
    - Task functions to register
    - Redis connection settings
    - Job timeout settings
    """

    functions = [render_order_document]
    on_startup = startup
    on_shutdown = shutdown

    # These will be set from environment
    redis_settings = None
    max_jobs = 10
    job_timeout = 300

    @classmethod
    def get_redis_settings(cls) -> Any:
        """Get Redis settings from configuration."""
        from arq.connections import RedisSettings as ArqRedisSettings

        settings = get_settings()
        return ArqRedisSettings.from_dsn(settings.redis_url)
