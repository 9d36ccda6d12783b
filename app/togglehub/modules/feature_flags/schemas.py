from __future__ import annotations

from typing import Literal

from pydantic import Field

from app.togglehub.schemas import RequestModel


class Rule(RequestModel):
    predicate: str = Field(min_length=1)
    value: str = Field(min_length=1)
    env: str = Field(min_length=1)
    is_enabled: bool = False


class PostFeatureFlagRequest(RequestModel):
    name: str = Field(min_length=1, max_length=255)
    type: Literal["boolean", "json", "string", "number"]
    default_value: str = Field(min_length=1)
    rules: list[Rule] | None = None


class PatchFeatureFlagRequest(RequestModel):
    default_value: str = ""
    rules: list[Rule] | None = None
