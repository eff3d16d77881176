"""Ingress adapter for collection responses.

The service wraps collections in a named field (``{"users": [...]}``) while
other deployments answer with ``{"items": [...]}`` or a bare list. Everything
the adapter cannot recognise becomes an empty collection.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence, Type, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

GENERIC_ENVELOPE = "items"


def unwrap_collection(payload: Any, envelope: Optional[str] = None) -> List[Any]:
    """Return the raw entries of an enveloped or bare collection."""

    if isinstance(payload, list):
        return payload
    if isinstance(payload, dict):
        for key in (envelope, GENERIC_ENVELOPE):
            if key and isinstance(payload.get(key), list):
                return payload[key]
    return []


def normalize_collection(
    payload: Any, model: Type[T], envelope: Optional[str] = None
) -> List[T]:
    """Validate each entry of ``payload`` into ``model``.

    Entries the model rejects are skipped so one malformed record does not
    hide the rest of the collection.
    """

    entries: Sequence[Any] = unwrap_collection(payload, envelope)
    items: List[T] = []
    for entry in entries:
        try:
            items.append(model.model_validate(entry))
        except ValidationError:
            logger.warning(
                "skipping malformed %s entry %r", model.__name__, entry, exc_info=True
            )
    return items
