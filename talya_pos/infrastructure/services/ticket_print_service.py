"""
Ticket Print Service

Sends kitchen tickets to the print relay over HTTP with a bounded timeout and
a small number of linearly backed-off retries. Failures are reported as a
PrintOutcome, never raised.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from talya_pos.domain.entities.order_entity import Order
from talya_pos.infrastructure.logging.logging_config import get_structured_logger
from talya_pos.infrastructure.utilities.constants import PrintSettings, UserMessages
from talya_pos.infrastructure.utilities.exceptions import PrintError


@dataclass(frozen=True)
class PrintOutcome:
    """Result of a print request"""

    success: bool
    attempts: int = 0
    error: Optional[str] = None

    @classmethod
    def ok(cls, attempts: int) -> "PrintOutcome":
        return cls(success=True, attempts=attempts)

    @classmethod
    def failed(cls, error: str, attempts: int = 0) -> "PrintOutcome":
        return cls(success=False, attempts=attempts, error=error)


def validate_print_data(order: Order) -> List[str]:
    """Problems that would make the ticket unprintable; empty when fine"""
    errors = []
    if not order.items:
        errors.append("The order has no items")

    for index, item in enumerate(order.items, start=1):
        if not item.name or not item.name.strip():
            errors.append(f"Item {index} has no name")
        if item.quantity <= 0:
            errors.append(f"Item {index} has an invalid quantity")
        if item.unit_price < 0:
            errors.append(f"Item {index} has a negative price")

    if not order.destination:
        errors.append("The order has no table or client number")
    return errors


class TicketPrintService:
    """HTTP client for the ticket print relay"""

    def __init__(
        self,
        endpoint: str,
        printer_address: str,
        auth_token: str = "",
        timeout_seconds: float = PrintSettings.TIMEOUT_SECONDS,
        max_attempts: int = PrintSettings.MAX_ATTEMPTS,
        backoff_seconds: float = PrintSettings.RETRY_BACKOFF_SECONDS,
        currency: str = "EUR",
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._endpoint = endpoint
        self._printer_address = printer_address
        self._auth_token = auth_token
        self._timeout = timeout_seconds
        self._max_attempts = max_attempts
        self._backoff = backoff_seconds
        self._currency = currency
        self._transport = transport
        self._sleep = sleep
        self._logger = get_structured_logger(self.__class__.__name__)

    @classmethod
    def from_settings(cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "TicketPrintService":
        return cls(
            endpoint=settings.printer_endpoint,
            printer_address=settings.printer_address,
            auth_token=settings.printer_auth_token,
            timeout_seconds=settings.print_timeout_seconds,
            max_attempts=settings.print_max_attempts,
            backoff_seconds=settings.print_retry_backoff_seconds,
            currency=settings.currency,
            transport=transport,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._printer_address)

    def build_payload(self, order: Order) -> Dict[str, Any]:
        products = []
        for item in order.items:
            product: Dict[str, Any] = {
                "name": item.name,
                "quantity": item.quantity,
                "unitPrice": float(item.unit_price),
            }
            if item.emoji:
                product["emoji"] = item.emoji
            if item.special_instructions:
                product["specialInstructions"] = item.special_instructions
            if item.composed_details:
                product["composedDetails"] = list(item.composed_details)
            if item.portion_label:
                product["portionLabel"] = item.portion_label
            products.append(product)

        payload: Dict[str, Any] = {
            "printerAddress": self._printer_address,
            "tableOrClientLabel": order.destination_label,
            "orderId": order.id,
            "orderType": order.mode.value,
            "total": float(order.total),
            "currency": self._currency,
            "createdAt": order.created_at.isoformat(),
            "products": products,
        }
        if order.note:
            payload["globalNote"] = order.note
        return payload

    async def print_order(self, order: Order) -> PrintOutcome:
        """Print the ticket, retrying on timeout, transport errors and non-2xx"""
        if not self.is_configured:
            self._logger.warning("print_skipped", order_id=order.id, reason=UserMessages.PRINTER_NOT_CONFIGURED)
            return PrintOutcome.failed(UserMessages.PRINTER_NOT_CONFIGURED)

        errors = validate_print_data(order)
        if errors:
            self._logger.warning("print_data_invalid", order_id=order.id, errors=errors)
            return PrintOutcome.failed("; ".join(errors))

        payload = self.build_payload(order)
        last_error = None
        for attempt in range(1, self._max_attempts + 1):
            try:
                await self._send(payload, attempt)
                self._logger.info("ticket_printed", order_id=order.id, attempt=attempt)
                return PrintOutcome.ok(attempt)
            except PrintError as e:
                last_error = str(e)
                self._logger.warning(
                    "print_attempt_failed",
                    order_id=order.id,
                    attempt=attempt,
                    max_attempts=self._max_attempts,
                    error=last_error,
                )
                if attempt < self._max_attempts:
                    await self._sleep(self._backoff * attempt)

        self._logger.error("print_failed", order_id=order.id, attempts=self._max_attempts, error=last_error)
        return PrintOutcome.failed(last_error or "Unknown print error", self._max_attempts)

    async def _send(self, payload: Dict[str, Any], attempt: int) -> None:
        headers = {"Content-Type": PrintSettings.CONTENT_TYPE}
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(self._endpoint, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise PrintError(f"Print request timed out after {self._timeout}s", attempt) from e
        except httpx.HTTPError as e:
            raise PrintError(f"Printer unreachable: {e}", attempt) from e
        except httpx.InvalidURL as e:
            raise PrintError(f"Invalid printer endpoint {self._endpoint!r}: {e}", attempt) from e

        if not response.is_success:
            raise PrintError(
                f"Print relay answered {response.status_code}: {response.text[:200]}", attempt
            )
