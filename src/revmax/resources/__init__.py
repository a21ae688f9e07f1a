"""
API resources.

Thin wrappers that validate payloads and forward them to the request
executor.
"""

from revmax.resources.customers import Customers
from revmax.resources.models import (
    CustomerCreateParams,
    CustomerListParams,
    CustomerUpdateParams,
    UsageRecord,
)
from revmax.resources.usage import Usage

__all__ = [
    "Customers",
    "Usage",
    "CustomerCreateParams",
    "CustomerListParams",
    "CustomerUpdateParams",
    "UsageRecord",
]
