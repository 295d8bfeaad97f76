"""Base model and enum for fleet API records.

Every fleet model inherits from :class:`FleetBaseModel` which provides:

* ``alias_generator=to_camel`` so camelCase API keys map
  automatically to snake_case fields.
* A ``model_validator(mode="before")`` that strips sentinel values
  (``None``, ``""``, ``"--"``, NaN) so the field default is used, and
  renames legacy API keys declared in ``_KEY_ALIASES``.
"""

from __future__ import annotations

import enum
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

from fleettrack.ingestion.normalize import is_sentinel


class VehicleStatus(enum.StrEnum):
    """Operational status of a tracked vehicle."""

    ACTIVE = "active"
    IDLE = "idle"
    ALERT = "alert"

    @classmethod
    def _missing_(cls, value: object) -> VehicleStatus | None:
        if isinstance(value, str):
            normalized = value.strip().lower()
            for member in cls:
                if member.value == normalized:
                    return member
        return None


class FleetBaseModel(BaseModel):
    """Base for fleet API records.

    Handles:
    * camelCase → snake_case via ``alias_generator=to_camel``
    * sentinel values → dropped so the field default is used instead
    * legacy key renames via ``_KEY_ALIASES``
    """

    _KEY_ALIASES: ClassVar[dict[str, str]] = {}
    """``{"legacyKey": "canonicalKey"}`` renames applied before validation.

    A legacy key is only renamed when the canonical key is absent, so an
    explicit canonical value always wins.
    """

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        populate_by_name=True,
        alias_generator=to_camel,
        str_strip_whitespace=True,
    )

    @staticmethod
    def _clean_dict(values: dict[str, Any], aliases: dict[str, str] | None = None) -> dict[str, Any]:
        """Strip sentinel values and apply key aliases on *values*."""
        working = dict(values)
        if aliases:
            for old_key, new_key in aliases.items():
                if old_key in working and new_key not in working:
                    working[new_key] = working.pop(old_key)

        return {key: value for key, value in working.items() if not is_sentinel(value)}

    @model_validator(mode="before")
    @classmethod
    def _clean_values(cls, values: Any) -> Any:
        """Strip sentinel values and apply key aliases."""
        if not isinstance(values, dict):
            return values
        aliases: dict[str, str] = getattr(cls, "_KEY_ALIASES", {})
        return FleetBaseModel._clean_dict(values, aliases)
