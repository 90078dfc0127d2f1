"""Product assistant boundary (suggestions and stock-command parsing)"""

from typing import List, Optional, Protocol

from retailpro.domain.models import ProductSuggestion, StockAction, StockCommand


class ProductAssistant(Protocol):
    """
    External collaborator that suggests products and parses stock commands.

    Implementations absorb their own failures: suggest() returns [] and
    parse_command() returns None instead of raising.
    """

    async def suggest(self, query: str) -> List[ProductSuggestion]: ...

    async def parse_command(self, transcript: str) -> Optional[StockCommand]: ...


class NullAssistant:
    """Assistant used when no service is configured"""

    async def suggest(self, query: str) -> List[ProductSuggestion]:
        return []

    async def parse_command(self, transcript: str) -> Optional[StockCommand]:
        return None


def actionable_stock_action(command: Optional[StockCommand]) -> Optional[StockAction]:
    """Stock action for a parsed command, or None if the command must be ignored"""
    if command is None or command.quantity is None or not command.product_name:
        return None
    try:
        return StockAction(command.action)
    except ValueError:
        return None
