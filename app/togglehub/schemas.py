from __future__ import annotations

from typing import TypeVar

from flask import request
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from app.togglehub.errors import ClientInputError

M = TypeVar("M", bound=BaseModel)


class RequestModel(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


def parse_body(model: type[M]) -> M:
    """Validate the JSON request body into ``model`` or raise a 400."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ClientInputError("request body must be a JSON object")
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ClientInputError(f"invalid request body: {e.errors(include_url=False)}") from e


class SignUpRequest(RequestModel):
    email: str = Field(min_length=3, max_length=320)
    password: str = Field(min_length=1)
    first_name: str = Field(min_length=1, max_length=128)
    last_name: str = Field(min_length=1, max_length=128)

    @field_validator("email")
    @classmethod
    def _email_shape(cls, v: str) -> str:
        local, sep, domain = v.partition("@")
        if not sep or not local or not domain:
            raise ValueError("email must look like name@domain")
        return v.lower()


class SignInRequest(RequestModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)
