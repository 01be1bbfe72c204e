from collections.abc import Iterable
from typing import Any

from pydantic import BaseModel


def first_field(model: BaseModel | None, fields: Iterable[str]) -> Any:
    """Return the first populated attribute of ``model``, in ``fields`` order.

    ``None`` and empty strings count as unpopulated, so upstream payloads that
    send ``""`` for a missing name fall through to the next field.
    """
    if model is None:
        return None
    for name in fields:
        value = getattr(model, name, None)
        if value is None or value == "":
            continue
        return value
    return None


def as_str(value: Any) -> str | None:
    """Identifiers arrive as ints or strings depending on the endpoint."""
    if value is None or value == "":
        return None
    return str(value)
