from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .exceptions import ValidationError

M = TypeVar("M", bound=BaseModel)

CATALOG_FIELDS = ("lotteryTypes", "lotteries")
INVENTORY_FIELDS = ("inventory", "data")


def extract_collection(payload: Any, fields: Sequence[str]) -> list[Any]:
    """Return the row list from a bare array or a wrapper object.

    Named fields are tried in order; the first one holding a list wins.
    Anything else decodes to an empty list.
    """
    if isinstance(payload, list):
        return list(payload)
    if isinstance(payload, Mapping):
        for name in fields:
            value = payload.get(name)
            if isinstance(value, list):
                return list(value)
    return []


def parse_rows(rows: Sequence[Any], model_type: type[M], *, source: str) -> list[M]:
    parsed: list[M] = []
    for index, row in enumerate(rows):
        try:
            parsed.append(model_type.model_validate(row))
        except PydanticValidationError as exc:
            raise ValidationError(
                code="MALFORMED_PAYLOAD",
                message=f"Invalid {source} row at index {index}",
                details={"index": index, "errors": exc.errors(include_url=False)},
                raw_payload=row,
            ) from exc
    return parsed
