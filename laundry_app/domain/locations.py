"""Local administrative areas used to scope customer addresses."""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class Ward(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    panchayath_id: str


class Panchayath(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    wards: list[Ward] = Field(default_factory=list)
