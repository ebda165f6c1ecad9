# storefront/services/invoice_service.py
import asyncio
import logging
import uuid
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import AsyncIterator, BinaryIO

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas
from sqlmodel import Session

from storefront.core.fanout import FanOutWriter, FileSink, QueueSink, Sink
from storefront.core.identity import Identity
from storefront.schemas.order import OrderRead
from storefront.services.order_service import OrderService

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
SEPARATOR = "-" * 40

# Layout (points)
LEFT_MARGIN = 72
TOP_MARGIN = 72
BOTTOM_MARGIN = 72
TITLE_SIZE = 26
LINE_SIZE = 14
TOTAL_SIZE = 20
FONT = "Helvetica"

# Response chunks allowed to wait for a slow client
STREAM_QUEUE_CHUNKS = 4


def invoice_filename(order_id: uuid.UUID) -> str:
    """Persisted invoice name; kept stable for existing files."""
    return f"invoice-{order_id}.pdf"


def _money(value: Decimal) -> str:
    return f"${value.quantize(CENT)}"


@dataclass(frozen=True)
class InvoiceLine:
    title: str
    quantity: int
    unit_price: Decimal
    line_total: Decimal

    @property
    def text(self) -> str:
        return f"{self.title} - {self.quantity} x {_money(self.unit_price)}"


@dataclass(frozen=True)
class Invoice:
    order_id: uuid.UUID
    lines: tuple[InvoiceLine, ...]
    grand_total: Decimal

    @property
    def total_text(self) -> str:
        return f"Total Price: {_money(self.grand_total)}"


def build_invoice(order: OrderRead) -> Invoice:
    """
    Price an order from its stored line items only (never the live catalog).
    """
    lines = tuple(
        InvoiceLine(
            title=item.title,
            quantity=item.quantity,
            unit_price=item.unit_price,
            line_total=(item.unit_price * item.quantity).quantize(CENT),
        )
        for item in order.items
    )
    grand_total = sum((line.line_total for line in lines), Decimal("0.00"))
    return Invoice(order_id=order.id, lines=lines, grand_total=grand_total)


def draw_invoice(invoice: Invoice, out: BinaryIO) -> None:
    """
    Render the invoice PDF into `out`.

    invariant=1 pins ReportLab's timestamp and document id, so the same
    invoice always produces the same bytes.

    The canvas serializes the whole document inside `save()` and hands it to
    `out` in one write; `out` splits it into chunks. Only the response side
    is bounded (STREAM_QUEUE_CHUNKS); the serialized PDF itself is held in
    memory for the duration of that write.
    """
    pdf = canvas.Canvas(out, pagesize=A4, invariant=1, pageCompression=0)
    pdf.setTitle(f"Invoice {invoice.order_id}")
    _, height = A4

    y = height - TOP_MARGIN
    pdf.setFont(FONT, TITLE_SIZE)
    pdf.drawString(LEFT_MARGIN, y, "Invoice")
    underline = pdf.stringWidth("Invoice", FONT, TITLE_SIZE)
    pdf.line(LEFT_MARGIN, y - 4, LEFT_MARGIN + underline, y - 4)
    y -= TITLE_SIZE * 2

    pdf.setFont(FONT, LINE_SIZE)
    for line in invoice.lines:
        if y < BOTTOM_MARGIN:
            pdf.showPage()
            pdf.setFont(FONT, LINE_SIZE)
            y = height - TOP_MARGIN
        pdf.drawString(LEFT_MARGIN, y, line.text)
        y -= LINE_SIZE * 1.2

    pdf.drawString(LEFT_MARGIN, y, SEPARATOR)
    y -= LINE_SIZE * 2.4

    if y < BOTTOM_MARGIN:
        pdf.showPage()
        y = height - TOP_MARGIN
    pdf.setFont(FONT, TOTAL_SIZE)
    pdf.drawString(LEFT_MARGIN, y, invoice.total_text)

    pdf.showPage()
    pdf.save()


class InvoiceService:
    """
    Invoice Renderer.

    One rendering pass feeds two sinks: the invoice file under INVOICE_DIR
    and the HTTP response stream. Either may fail without affecting the other.
    """

    def __init__(self, order_service: OrderService, invoice_dir: Path):
        self.orders = order_service
        self.invoice_dir = invoice_dir

    def invoice_path(self, order_id: uuid.UUID) -> Path:
        return self.invoice_dir / invoice_filename(order_id)

    async def render_invoice(
        self,
        session: Session,
        order_id: uuid.UUID,
        identity: Identity,
    ) -> tuple[Invoice, AsyncIterator[bytes]]:
        """
        Authorize, price, and start streaming an invoice.

        NotFoundError / ForbiddenError from OrderService.get_order propagate
        unchanged, before anything is rendered or written.

        Returns the priced invoice and an async iterator over the PDF bytes.
        The file is written as the iterator is consumed.
        """
        order = await self.orders.get_order(session, order_id, identity)
        invoice = build_invoice(order)
        return invoice, self.stream_invoice(invoice, self.invoice_path(order.id))

    async def stream_invoice(self, invoice: Invoice, path: Path) -> AsyncIterator[bytes]:
        loop = asyncio.get_running_loop()
        queue: asyncio.Queue[bytes | None] = asyncio.Queue(maxsize=STREAM_QUEUE_CHUNKS)

        sinks: list[Sink] = []
        try:
            sinks.append(FileSink(path))
        except OSError as e:
            logger.error("Cannot open invoice file %s: %s", path, e)
        stream = QueueSink(queue, loop)
        sinks.append(stream)

        writer = FanOutWriter(sinks)
        producer = loop.run_in_executor(None, _produce, invoice, writer, path)
        producer.add_done_callback(_log_producer_failure)

        try:
            while True:
                chunk = await queue.get()
                if chunk is None:
                    break
                yield chunk
        finally:
            # Client gone: the file sink still gets the whole document.
            stream.detach()

        await producer


def _produce(invoice: Invoice, writer: FanOutWriter, path: Path) -> None:
    try:
        draw_invoice(invoice, writer)
    finally:
        writer.close()
    persisted = any(isinstance(s, FileSink) for s in writer.sinks) and not any(
        name.startswith("file:") for name in writer.failed
    )
    if not persisted:
        logger.error("Invoice for order %s was not persisted", invoice.order_id)
    else:
        logger.info(
            "Invoice for order %s written to %s (%d bytes)",
            invoice.order_id,
            path,
            writer.bytes_written,
        )


def _log_producer_failure(fut: "asyncio.Future[None]") -> None:
    if fut.cancelled():
        return
    exc = fut.exception()
    if exc is not None:
        logger.error("Invoice rendering failed: %s", exc)
