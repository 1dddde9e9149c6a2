"""
models/client.py
----------------
Domain model for customers.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class Client:
    """
    A customer that places orders.

    Attributes:
        cpf: Tax id, unique per client.
        name: Display name (stored upper-cased).
        id: Database primary key (None until inserted).
    """
    cpf: str
    name: str
    id: Optional[int] = None

    def __str__(self) -> str:
        return f"#{self.id} {self.name} ({self.cpf})"
