"""
Request payload schemas for RevMax resources.

Pydantic models validate caller input before it goes on the wire and dump it
with the API's camelCase field names. Fields left unset are not sent.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from revmax.errors.exceptions import ValidationError

CustomerStatus = Literal["active", "inactive", "suspended"]


class ApiModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
    )

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_unset=True, mode="json")


class UsageRecord(ApiModel):
    """Schema for one usage event.

    Attributes:
        customer_external_id: Customer id in the caller's system
        agent_id: Agent that produced the usage
        signal_name: Billable signal being recorded
        quantity: Amount of usage
        usage_date: When the usage occurred (server uses now when omitted)
        metadata: Free-form metadata stored with the record
    """

    customer_external_id: str = Field(..., min_length=1)
    agent_id: str = Field(..., min_length=1)
    signal_name: str = Field(..., min_length=1)
    quantity: float
    usage_date: datetime | str | None = None
    metadata: dict[str, Any] | None = None


class CustomerCreateParams(ApiModel):
    name: str = Field(..., min_length=1)
    external_id: str | None = None
    email: str | None = None
    phone: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    status: CustomerStatus | None = None
    billing_contact_name: str | None = None
    billing_contact_email: str | None = None
    metadata: dict[str, Any] | None = None


class CustomerUpdateParams(ApiModel):
    name: str | None = None
    external_id: str | None = None
    email: str | None = None
    phone: str | None = None
    address_line1: str | None = None
    address_line2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None
    status: CustomerStatus | None = None
    billing_contact_name: str | None = None
    billing_contact_email: str | None = None
    metadata: dict[str, Any] | None = None


class CustomerListParams(ApiModel):
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1)
    name: str | None = None
    email: str | None = None
    status: CustomerStatus | None = None
    sort_by: str | None = None
    sort_order: Literal["asc", "desc"] | None = None


def validate_params(model: type[ApiModel], params: Any) -> ApiModel:
    """
    Coerce caller input into ``model``.

    Raises:
        ValidationError: With a field -> messages map when input is invalid
    """
    if isinstance(params, model):
        return params
    try:
        return model.model_validate(params or {})
    except PydanticValidationError as e:
        field_errors: dict[str, list[str]] = {}
        for err in e.errors():
            field = ".".join(str(part) for part in err["loc"]) or "__root__"
            field_errors.setdefault(field, []).append(err["msg"])
        raise ValidationError(
            f"Invalid {model.__name__}",
            validation_errors=field_errors,
            cause=e,
        ) from e


__all__ = [
    "ApiModel",
    "CustomerStatus",
    "UsageRecord",
    "CustomerCreateParams",
    "CustomerUpdateParams",
    "CustomerListParams",
    "validate_params",
]
