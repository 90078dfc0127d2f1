"""WhatsApp hand-off for payment reminders"""

import logging
import httpx
from retailpro.config import settings
from retailpro.domain.reminders import whatsapp_link
from retailpro.infrastructure.observability.metrics import messaging_failure_counter


class WhatsAppClient:
    """
    Fire-and-forget messaging channel addressed by phone number.

    With a webhook configured the message is posted to it once (no retries);
    without one the click-to-chat link is only logged.
    """

    def __init__(
        self,
        webhook_url: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.webhook_url = settings.messaging_webhook_url if webhook_url is None else webhook_url
        self.base_url = base_url or settings.whatsapp_base_url
        self.timeout = timeout or settings.http_timeout_seconds
        self.transport = transport

    async def send_message(self, phone: str, text: str) -> None:
        link = whatsapp_link(phone, text, self.base_url)

        if not self.webhook_url:
            logging.info("WhatsApp message ready", extra={"phone": phone, "link": link})
            return

        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.post(
                    self.webhook_url,
                    json={"to": phone, "text": text, "link": link},
                )
                response.raise_for_status()
            except httpx.HTTPError as e:
                # Delivery is not awaited by the reminder workflow; record and move on
                messaging_failure_counter.inc()
                logging.warning(f"WhatsApp hand-off failed: {e}", extra={"phone": phone})
