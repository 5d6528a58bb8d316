"""Activity schemas."""
from datetime import datetime
from typing import Any

from .base import CamelRead


class ActivityRead(CamelRead):
    id: int
    tipo: str
    descricao: str
    metadados: dict[str, Any] | None
    icone: str | None
    cor: str | None
    data: datetime
