"""Response envelope shared by every endpoint.

Successful calls return ``{statusCode, data, message, success}``.  Errors are
rendered by the exception handlers in ``app.main`` from
``ApiError.to_payload`` as ``{statusCode, message, errors, success}``.
"""

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Success envelope."""
    model_config = ConfigDict(populate_by_name=True)

    status_code: int = Field(default=200, alias="statusCode")
    data: T
    message: str = "Success"
    success: bool = True

    @classmethod
    def ok(cls, data: Any, message: str = "Success", status_code: int = 200) -> "ApiResponse":
        return cls(status_code=status_code, data=data, message=message, success=status_code < 400)


class IdRef(BaseModel):
    """Bare identifier of a created, edited or deleted document."""
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="_id")
