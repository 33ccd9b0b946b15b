from typing import Any

from pydantic import BaseModel, ConfigDict


class FrozenModel(BaseModel):
    """Base class for immutable configuration models.

    Unknown keys are ignored so that schema files may carry annotations
    (descriptions, comments) alongside the recognised fields.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)


def ensure_non_empty_text(value: str, field_name: str) -> str:
    if not isinstance(value, str):
        raise TypeError(f"{field_name} must be a string")
    if not value.strip():
        raise ValueError(f"{field_name} cannot be empty")
    return value


def ensure_non_empty_keys(value: Any, field_name: str) -> Any:
    if isinstance(value, dict):
        for key in value:
            ensure_non_empty_text(key, f"{field_name} key")
    return value
