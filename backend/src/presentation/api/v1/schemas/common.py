"""
Shared Schema Helpers
camelCase wire format and the success envelope
"""
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Accepts and emits camelCase, still constructible by field name"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ApiResponse(BaseModel):
    success: bool
    message: str
    data: Optional[Any] = None


def success_response(message: str, data: Any = None) -> dict:
    return {"success": True, "message": message, "data": jsonable_encoder(data, by_alias=True)}


def error_response(message: str, errors: Any = None) -> dict:
    body = {"success": False, "message": message}
    if errors is not None:
        body["errors"] = jsonable_encoder(errors)
    return body
