"""Offset pagination helpers shared by the list endpoints"""
import math
from typing import Any, List, Tuple

from sqlalchemy.orm import Query


def total_pages(total: int, limit: int) -> int:
    return math.ceil(total / limit) if limit > 0 else 0


def paginate(query: Query, page: int, limit: int) -> Tuple[List[Any], int]:
    """Return ``(items, total)`` for a 1-based page of an already-ordered query"""
    total = query.order_by(None).count()
    items = query.offset((page - 1) * limit).limit(limit).all()
    return items, total
