"""Record identifier helpers"""

import uuid


def generate_id(prefix: str) -> str:
    """Prefixed record id, e.g. INV-3F2A9C41D0B7"""
    return f"{prefix}-{uuid.uuid4().hex[:12].upper()}"
