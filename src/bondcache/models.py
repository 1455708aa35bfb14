"""Bond record model shared by the cache, the transports and callers.

A bond record is the unit exchanged across every boundary of the package:
the transport returns them, the store accepts them, and the fetcher hands
them back to callers. The ``data`` payload is opaque and never interpreted.
"""

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError


class InvalidArgumentError(ValueError):
    """Raised when a cache operation receives a malformed argument."""


class BondRecord(BaseModel):
    """Data for one instrument at one quote date.

    Attributes:
        isin: Instrument identifier (case-sensitive, non-empty)
        data: Opaque field-name -> value payload
    """

    model_config = ConfigDict(frozen=True)

    isin: str = Field(..., min_length=1, description="Instrument identifier")
    data: dict[str, Any] = Field(..., description="Opaque bond data payload")


def coerce_record(item: Any, index: int) -> BondRecord:
    """Validate one element of a bond list into a BondRecord.

    Args:
        item: A BondRecord or a mapping with ``isin`` and ``data`` keys
        index: Position of the element, used in the error message

    Returns:
        The validated record

    Raises:
        InvalidArgumentError: If the element does not have the record shape
    """
    if isinstance(item, BondRecord):
        return item
    if not isinstance(item, Mapping) or "isin" not in item or "data" not in item:
        raise InvalidArgumentError(
            f'Item {index} of argument "bonds" must be a record with "isin" and "data" '
            f"fields, got {type(item).__name__}"
        )
    try:
        return BondRecord.model_validate(dict(item))
    except ValidationError as e:
        raise InvalidArgumentError(f'Item {index} of argument "bonds" is malformed: {e}') from e


def coerce_records(bonds: Any) -> list[BondRecord]:
    """Validate a whole bond list before anything is written.

    Raises:
        InvalidArgumentError: If ``bonds`` is not a list/tuple or any element
            is malformed
    """
    if not isinstance(bonds, (list, tuple)):
        raise InvalidArgumentError(
            f'Argument "bonds" must be a list, got {type(bonds).__name__}'
        )
    return [coerce_record(item, index) for index, item in enumerate(bonds)]
