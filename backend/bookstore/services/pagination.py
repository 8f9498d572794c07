"""Page/size/sort handling shared by listing endpoints."""
from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Sequence


@dataclass(frozen=True)
class PageParams:
    page: int
    size: int
    sort: str | None

    @property
    def offset(self) -> int:
        return self.page * self.size

    @property
    def limit(self) -> int:
        return self.size


def get_pagination(
    page: Any = None,
    size: Any = None,
    sort: str | None = None,
    *,
    default_page: int = 0,
    default_size: int = 20,
    max_size: int = 50,
    max_page: int = 10_000,
    default_sort: str | None = None,
) -> PageParams:
    """Normalise raw query values.

    ``page`` is zero-based; out-of-range or unparsable values fall back to the
    defaults, ``size`` is capped at ``max_size`` and ``page`` at ``max_page``
    so the offset always fits the database integer type.
    """
    try:
        page_value = int(page) if page is not None else default_page
    except (TypeError, ValueError):
        page_value = default_page
    if page_value < 0:
        page_value = default_page
    page_value = min(page_value, max_page)

    try:
        size_value = int(size) if size is not None else default_size
    except (TypeError, ValueError):
        size_value = default_size
    if size_value <= 0:
        size_value = default_size
    size_value = min(size_value, max_size)

    return PageParams(page=page_value, size=size_value, sort=sort or default_sort)


def parse_sort(
    sort: str | None,
    allowed_fields: Sequence[str],
    default_field: str,
    default_descending: bool = True,
) -> tuple[str, bool]:
    """Split ``"field,DIR"`` (or ``"field:DIR"``) into ``(field, descending)``.

    Unknown fields fall back to ``default_field``.
    """
    if not sort:
        return default_field, default_descending

    parts = re.split(r"[,:]", sort, maxsplit=1)
    field = parts[0].strip() or default_field
    direction = parts[1].strip().upper() if len(parts) > 1 else "DESC"
    if field not in allowed_fields:
        field = default_field
    return field, direction != "ASC"


def build_paged_response(content: list, total_elements: int, params: PageParams) -> dict[str, Any]:
    total_pages = 0 if total_elements == 0 else math.ceil(total_elements / params.size)
    return {
        "content": content,
        "page": params.page,
        "size": params.size,
        "total_elements": total_elements,
        "total_pages": total_pages,
        "sort": params.sort,
    }
