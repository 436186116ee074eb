"""FastAPI application for order confirmation documents.

Production-ready API with:
- Health and readiness checks for Kubernetes
- Seller and buyer order confirmation PDFs
- Object storage with 7-day pre-signed links (inline data URL fallback)
- Background render jobs via arq
- Prometheus metrics for monitoring

Based on FastAPI best practices:
https://fastapi.tiangolo.com/
"""

import logging
import time
import uuid
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI, HTTPException, Request, Response, status
from pydantic import BaseModel

from services.api import metrics
from services.documents.errors import DocumentError, RenderTimeout, StorageFailure
from services.documents.renderer import PRESIGNED_URL_EXPIRY_SECONDS, DocumentRenderer
from services.documents.schema import PDF_MEDIA_TYPE, DocumentRole, OrderDocumentRequest
from services.queue.tasks import JobResult, WorkerSettings, job_key, utc_now
from services.shared.config import get_settings
from services.storage.service import StorageService

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

storage_service = StorageService(settings)
renderer = DocumentRenderer(settings, storage=storage_service)

_arq_pool: Any = None


async def get_arq_pool() -> Any:
    """Get or create the shared arq connection pool."""
    global _arq_pool
    if _arq_pool is None:
        from arq import create_pool

        _arq_pool = await create_pool(WorkerSettings.get_redis_settings())
    return _arq_pool


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    yield
    global _arq_pool
    if _arq_pool is not None:
        await _arq_pool.close()
        _arq_pool = None


def api_docs_urls(environment: str) -> dict[str, str | None]:
    """Interactive API docs are served everywhere except production."""
    if environment == "production":
        return {"docs_url": None, "redoc_url": None, "openapi_url": None}
    return {"docs_url": "/docs", "redoc_url": "/redoc", "openapi_url": "/openapi.json"}


app = FastAPI(
    title="Order Document Service",
    description="Renders seller and buyer order confirmations as PDF documents",
    version=settings.service_version,
    lifespan=lifespan,
    **api_docs_urls(settings.environment),
)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Middleware to collect request metrics.

    Tracks:
    - Request count by method, endpoint, and status
    - Request duration by method and endpoint
    """
    if request.url.path == "/metrics":
        return await call_next(request)

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    metrics.http_requests_total.labels(
        method=request.method,
        endpoint=request.url.path,
        status=response.status_code,
    ).inc()

    metrics.http_request_duration_seconds.labels(
        method=request.method,
        endpoint=request.url.path,
    ).observe(duration)

    return response


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    service: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool
    storage_configured: bool


class StoreResponse(BaseModel):
    """Stored document reference."""

    order_number: str
    role: DocumentRole
    reference: str
    stored: bool
    expires_in_seconds: int | None = None


class JobResponse(BaseModel):
    """Queued render job."""

    job_id: str
    status: str


def _document_error(e: DocumentError) -> HTTPException:
    """Map a document failure to an HTTP error."""
    if isinstance(e, RenderTimeout):
        code = status.HTTP_504_GATEWAY_TIMEOUT
    elif isinstance(e, StorageFailure):
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_500_INTERNAL_SERVER_ERROR
    return HTTPException(status_code=code, detail=str(e))


def _require_queue() -> None:
    if not settings.queue_enabled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Background jobs are not enabled (set APP_QUEUE_ENABLED=true)",
        )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check() -> HealthResponse:
    """Health check endpoint for liveness probe."""
    return HealthResponse(
        status="healthy", version=settings.service_version, service=settings.service_name
    )


@app.get("/ready", response_model=ReadinessResponse, tags=["Health"])
def readiness_check() -> ReadinessResponse:
    """Readiness check endpoint for Kubernetes readiness probe.

    Storage is optional; without it documents are returned inline.
    """
    return ReadinessResponse(ready=True, storage_configured=renderer.storage_configured)


@app.get("/metrics", tags=["Monitoring"])
def get_metrics() -> Response:
    """Prometheus metrics endpoint."""
    metrics_data, content_type = metrics.get_metrics()
    return Response(content=metrics_data, media_type=content_type)


@app.post("/api/v1/pdf/order/{role}", tags=["Documents"])
async def render_order_pdf(role: DocumentRole, order: OrderDocumentRequest) -> Response:
    """Render an order confirmation and return the PDF.

    ## Usage Example

    ```bash
    curl -X POST "http://localhost:8000/api/v1/pdf/order/seller" \\
      -H "Content-Type: application/json" \\
      -d @order.json -o seller.pdf
    ```

    Returns:
        PDF document served inline as ``{role}-{orderNumber}.pdf``

    Raises:
        HTTPException: 500 if rendering fails, 504 if it times out
    """
    try:
        document = await renderer.render_document(order, role)
    except DocumentError as e:
        raise _document_error(e) from e

    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={"Content-Disposition": f'inline; filename="{document.filename}"'},
    )


@app.post(
    "/api/v1/pdf/order/{role}/store",
    response_model=StoreResponse,
    tags=["Documents"],
)
async def store_order_pdf(role: DocumentRole, order: OrderDocumentRequest) -> StoreResponse:
    """Render an order confirmation and return a reference to it.

    The reference is a pre-signed URL valid for 7 days when object storage
    is configured, otherwise a ``data:application/pdf;base64,...`` URL.

    Raises:
        HTTPException: 500/504 on render failure, 502 if storage fails
    """
    try:
        reference = await renderer.render_and_store(order, role)
    except DocumentError as e:
        raise _document_error(e) from e

    stored = not reference.startswith(f"data:{PDF_MEDIA_TYPE}")
    return StoreResponse(
        order_number=order.order_number,
        role=role,
        reference=reference,
        stored=stored,
        expires_in_seconds=PRESIGNED_URL_EXPIRY_SECONDS if stored else None,
    )


@app.post(
    "/api/v1/pdf/order/{role}/jobs",
    response_model=JobResponse,
    tags=["Jobs"],
)
async def enqueue_order_pdf(role: DocumentRole, order: OrderDocumentRequest) -> JobResponse:
    """Queue an order confirmation to be rendered and stored in the background.

    Poll ``GET /api/v1/jobs/{job_id}`` for the resulting document reference.

    Raises:
        HTTPException: 503 if background jobs are disabled
    """
    _require_queue()

    pool = await get_arq_pool()
    job_id = str(uuid.uuid4())

    pending = JobResult(
        job_id=job_id,
        status="pending",
        order_number=order.order_number,
        role=role,
        created_at=utc_now(),
    )
    await pool.set(job_key(job_id), pending.model_dump_json(), ex=settings.job_result_ttl_seconds)
    await pool.enqueue_job(
        "render_order_document",
        job_id=job_id,
        order=order.model_dump(mode="json"),
        role=role.value,
        _job_id=job_id,
    )

    logger.info(f"Queued {role.value} document for order {order.order_number} as job {job_id}")
    return JobResponse(job_id=job_id, status="pending")


@app.get("/api/v1/jobs/{job_id}", response_model=JobResult, tags=["Jobs"])
async def get_job_status(job_id: str) -> JobResult:
    """Get the status of a background render job.

    Raises:
        HTTPException: 503 if background jobs are disabled, 404 if the job is unknown
    """
    _require_queue()

    pool = await get_arq_pool()
    raw = await pool.get(job_key(job_id))
    if raw is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Job not found")

    return JobResult.model_validate_json(raw)
