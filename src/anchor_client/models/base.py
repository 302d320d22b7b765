"""Base model shared by every control-plane record."""

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator


class ResourceModel(BaseModel):
    """Base for records parsed from control-plane payloads.

    Wire fields are camelCase (aliases); unknown fields are ignored and
    explicit nulls fall back to the field default.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data
