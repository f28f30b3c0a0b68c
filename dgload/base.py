"""Base model for dgload pydantic models with YAML loading."""

from __future__ import annotations

from typing import Self

import yaml
from pydantic import BaseModel, ConfigDict


class ConfigBaseModel(BaseModel):
    """Base model for all dgload pydantic models."""

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        use_enum_values=True,
        validate_assignment=True,
    )

    @classmethod
    def from_yaml(cls, path: str) -> Self:
        """Load a single instance from a YAML file."""
        with open(path) as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data or {})
