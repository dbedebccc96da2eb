from __future__ import annotations

from dataclasses import dataclass, field

from django.core.exceptions import ValidationError

MAX_PAGE_LIMIT = 50


@dataclass(frozen=True)
class IdPage:
    """
    Offset/limit page contract shared by id listings:
      { count, results }
    count is the size of the whole filtered set, results the ids of this page.
    """
    count: int
    results: list[int] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {"count": self.count, "results": list(self.results)}


def check_page_bounds(*, offset: int, limit: int, max_limit: int = MAX_PAGE_LIMIT) -> None:
    if offset < 0:
        raise ValidationError("offset has to be a non-negative integer")
    if limit <= 0:
        raise ValidationError("limit has to be a positive integer")
    if limit > max_limit:
        raise ValidationError(f"maximum allowed limit values is {max_limit}")
