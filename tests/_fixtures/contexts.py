from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class Ctx:
    """Minimal traversal context, as the query engine would pass it."""

    active_vertex: Any = None
