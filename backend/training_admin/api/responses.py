"""Envelope helpers: every endpoint answers ``{status, message, data, pagination?}``."""

from typing import Any

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel

from training_admin.services.query.pagination import PageResult


def ok(data: Any = None, message: str = "OK") -> dict[str, Any]:
    return {"status": "SUCCESS", "message": message, "data": jsonable_encoder(data)}


def paged(result: PageResult, message: str) -> dict[str, Any]:
    body = ok(result.items, message)
    body["pagination"] = result.pagination()
    return body


def dump(schema: type[BaseModel], row: Any) -> dict[str, Any]:
    return schema.model_validate(row).model_dump(mode="json")


def error_body(message: str, details: Any = None) -> dict[str, Any]:
    body: dict[str, Any] = {"status": "ERROR", "message": message}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return body
