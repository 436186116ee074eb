"""Order confirmation renderer.

Produces a print-ready PDF for one order from the seller's or buyer's point
of view and optionally persists it:

- Storage configured (access key, secret key and bucket): the PDF is uploaded
  to ``orders/{order_number}/{role}-{order_number}.pdf`` and a pre-signed URL
  valid for 7 days is returned.
- Storage not configured: no network call is made and the PDF is returned
  inline as a ``data:application/pdf;base64,...`` reference.

The branch depends on configuration only. A failed upload is an error, it
never falls back to the inline reference.
"""

import asyncio
import base64
import logging
import time
from datetime import datetime

from services.api import metrics
from services.documents.engine import BrowserEngine
from services.documents.errors import RenderFailure, StorageFailure
from services.documents.schema import (
    PDF_MEDIA_TYPE,
    DocumentRole,
    OrderDocumentRequest,
    RenderedDocument,
)
from services.documents.templates import render_order_html
from services.shared.config import Settings
from services.storage.service import StorageService

logger = logging.getLogger(__name__)

PRESIGNED_URL_EXPIRY_SECONDS = 7 * 24 * 60 * 60


def storage_key(order_number: str, role: DocumentRole) -> str:
    """Object name of the stored document for an order and role."""
    role = DocumentRole(role)
    return f"orders/{order_number}/{role.value}-{order_number}.pdf"


def to_data_url(content: bytes, media_type: str = PDF_MEDIA_TYPE) -> str:
    """Encode a document as a self-contained data URL."""
    payload = base64.b64encode(content).decode("ascii")
    return f"data:{media_type};base64,{payload}"


class DocumentRenderer:
    """Renders order confirmations and stores them behind a document reference."""

    def __init__(
        self,
        settings: Settings,
        storage: StorageService | None = None,
        engine: BrowserEngine | None = None,
    ) -> None:
        """Initialize renderer.

        Args:
            settings: Application settings
            storage: Object storage (defaults to StorageService(settings))
            engine: Rendering engine (defaults to BrowserEngine(settings))
        """
        self.settings = settings
        self.storage = storage or StorageService(settings)
        self.engine = engine or BrowserEngine(settings)

    @property
    def storage_configured(self) -> bool:
        return self.storage.is_available()

    def render_html(
        self,
        order: OrderDocumentRequest,
        role: DocumentRole,
        generated_at: datetime | None = None,
    ) -> str:
        return render_order_html(order, DocumentRole(role), generated_at=generated_at)

    async def render_bytes(self, order: OrderDocumentRequest, role: DocumentRole) -> bytes:
        """Render an order confirmation to PDF bytes.

        Args:
            order: Order to render
            role: Point of view of the document

        Returns:
            PDF bytes

        Raises:
            RenderFailure: If the engine fails or times out
        """
        role = DocumentRole(role)
        html = self.render_html(order, role)

        start = time.time()
        try:
            pdf = await self.engine.html_to_pdf(html)
        except RenderFailure:
            metrics.documents_rendered_total.labels(role=role.value, status="failed").inc()
            raise
        duration = time.time() - start

        metrics.documents_rendered_total.labels(role=role.value, status="success").inc()
        metrics.document_render_duration_seconds.observe(duration)
        metrics.document_size_bytes.observe(len(pdf))

        logger.info(
            f"Rendered {role.value} confirmation for order {order.order_number} "
            f"({len(pdf)} bytes, {duration:.2f}s)"
        )
        return pdf

    async def render_document(
        self, order: OrderDocumentRequest, role: DocumentRole
    ) -> RenderedDocument:
        """Render an order confirmation with its delivery metadata."""
        role = DocumentRole(role)
        content = await self.render_bytes(order, role)
        return RenderedDocument(content=content, order_number=order.order_number, role=role)

    async def store_document(
        self, order: OrderDocumentRequest, role: DocumentRole
    ) -> RenderedDocument:
        """Render an order confirmation and persist it.

        Args:
            order: Order to render
            role: Point of view of the document

        Returns:
            RenderedDocument whose storage_reference is a pre-signed URL when
            storage is configured, otherwise a data URL

        Raises:
            RenderFailure: If rendering fails
            StorageFailure: If storage is configured and the upload or URL issuance fails
        """
        document = await self.render_document(order, role)
        reference = await self._persist(document)
        return document.model_copy(update={"storage_reference": reference})

    async def render_and_store(self, order: OrderDocumentRequest, role: DocumentRole) -> str:
        """Render and persist an order confirmation, returning only its reference."""
        document = await self.render_document(order, role)
        return await self._persist(document)

    async def _persist(self, document: RenderedDocument) -> str:
        if not self.storage_configured:
            metrics.documents_stored_total.labels(backend="inline", status="success").inc()
            logger.info(f"Storage not configured, returning inline {document.role.value} document")
            return to_data_url(document.content, document.media_type)

        object_name = storage_key(document.order_number, document.role)
        return await self._store(document.content, object_name)

    async def _store(self, pdf: bytes, object_name: str) -> str:
        upload = await asyncio.to_thread(self.storage.put_document, object_name, pdf)
        if not upload.success:
            metrics.documents_stored_total.labels(backend="object_storage", status="failed").inc()
            raise StorageFailure(f"Upload failed: {upload.error}", object_name=object_name)

        link = await asyncio.to_thread(
            self.storage.sign_download, object_name, PRESIGNED_URL_EXPIRY_SECONDS
        )
        if not link.success or not link.url:
            metrics.documents_stored_total.labels(backend="object_storage", status="failed").inc()
            # No reference will be handed out, so the object must not linger.
            await asyncio.to_thread(self.storage.remove, object_name)
            raise StorageFailure(
                f"Presigned URL generation failed: {link.error}",
                object_name=object_name,
            )

        metrics.documents_stored_total.labels(backend="object_storage", status="success").inc()
        return link.url
