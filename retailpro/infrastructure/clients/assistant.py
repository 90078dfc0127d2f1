"""Product assistant HTTP client for suggestions and stock-command parsing"""

import logging
import httpx
from typing import Any, List, Optional
from pydantic import BaseModel, ConfigDict, TypeAdapter, ValidationError
from pydantic.alias_generators import to_camel
from retailpro.domain.models import ProductSuggestion, StockCommand
from retailpro.domain.exceptions import AssistantAPIError
from retailpro.config import settings
from retailpro.infrastructure.observability.metrics import assistant_failure_counter


class _Payload(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class SuggestionPayload(_Payload):
    name: str
    hsn: str
    category: Optional[str] = None
    estimated_rate: Optional[float] = None


class CommandPayload(_Payload):
    action: str
    product_name: Optional[str] = None
    quantity: Optional[int] = None
    rate: Optional[float] = None


_suggestions_adapter = TypeAdapter(List[SuggestionPayload])


class HttpAssistantClient:
    """
    Client for the external product assistant service.

    Every failure (timeout, HTTP error, malformed payload) is absorbed here:
    callers get an empty suggestion list or no command, never an exception.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        shop_type: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = (base_url or settings.assistant_api_base).rstrip("/")
        self.timeout = timeout or settings.http_timeout_seconds
        self.shop_type = shop_type or settings.shop_type
        self.transport = transport

    async def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        """
        Call the assistant and return decoded JSON.

        Raises:
            AssistantAPIError: On timeout, HTTP errors, or a non-JSON body
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            try:
                response = await client.request(method, f"{self.base_url}{path}", **kwargs)
                response.raise_for_status()
                return response.json()

            except httpx.TimeoutException as e:
                raise AssistantAPIError(f"Assistant timeout after {self.timeout}s") from e
            except httpx.HTTPStatusError as e:
                raise AssistantAPIError(f"Assistant error: {e.response.status_code}") from e
            except httpx.HTTPError as e:
                raise AssistantAPIError(f"Assistant unreachable: {e}") from e
            except ValueError as e:
                raise AssistantAPIError(f"Invalid assistant response: {e}") from e

    async def suggest(self, query: str) -> List[ProductSuggestion]:
        """Product names and typical HSN codes related to a partial query"""
        try:
            data = await self._request("GET", "/suggestions", params={"q": query, "shop_type": self.shop_type})
            payloads = _suggestions_adapter.validate_python(data)
        except (AssistantAPIError, ValidationError) as e:
            assistant_failure_counter.labels(operation="suggest").inc()
            logging.error(f"Assistant suggestion error: {e}")
            return []

        return [
            ProductSuggestion(
                name=p.name,
                hsn=p.hsn,
                category=p.category,
                estimated_rate=p.estimated_rate,
            )
            for p in payloads
        ]

    async def parse_command(self, transcript: str) -> Optional[StockCommand]:
        """Parse a spoken or typed stock command, e.g. "add 50 packs of digestive biscuits" """
        try:
            data = await self._request("POST", "/commands/parse", json={"transcript": transcript})
            if data is None:
                return None
            payload = CommandPayload.model_validate(data)
        except (AssistantAPIError, ValidationError) as e:
            assistant_failure_counter.labels(operation="parse_command").inc()
            logging.error(f"Assistant command parse error: {e}")
            return None

        return StockCommand(
            action=payload.action,
            product_name=payload.product_name,
            quantity=payload.quantity,
            rate=payload.rate,
        )
