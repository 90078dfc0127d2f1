"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class AssistantAPIError(DomainException):
    """Assistant service returned an error or is unavailable"""

    pass


class AmbiguousProductMatchError(DomainException):
    """Product name resolves to more than one catalog entry (strict matching only)"""

    def __init__(self, product_name: str, matches: list[str]):
        super().__init__(f"'{product_name}' matches {len(matches)} products: {', '.join(matches)}")
        self.product_name = product_name
        self.matches = matches


class StorageError(DomainException):
    """Collections could not be persisted; in-memory state was left untouched"""

    pass
