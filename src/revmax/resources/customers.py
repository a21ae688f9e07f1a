"""Customer resource: thin CRUD wrapper over the request executor."""

from typing import Any

from revmax.api import ApiClient
from revmax.resources.models import (
    CustomerCreateParams,
    CustomerListParams,
    CustomerUpdateParams,
    validate_params,
)


class Customers:
    """Customer management endpoints under ``/customers``."""

    base_path = "/customers"

    def __init__(self, client: ApiClient):
        self.client = client
        self.logger = client.logger

    async def create(self, params: CustomerCreateParams | dict[str, Any]) -> dict[str, Any]:
        payload = validate_params(CustomerCreateParams, params).to_payload()
        self.logger.info("Creating customer", extra={"operation": "customers.create"})
        return await self.client.post(self.base_path, payload)

    async def get(self, customer_id: str) -> dict[str, Any]:
        self.logger.info("Retrieving customer: %s", customer_id)
        return await self.client.get(f"{self.base_path}/{customer_id}")

    async def update(
        self,
        customer_id: str,
        params: CustomerUpdateParams | dict[str, Any],
    ) -> dict[str, Any]:
        payload = validate_params(CustomerUpdateParams, params).to_payload()
        self.logger.info("Updating customer: %s", customer_id)
        return await self.client.patch(f"{self.base_path}/{customer_id}", payload)

    async def delete(self, customer_id: str) -> None:
        self.logger.info("Deleting customer: %s", customer_id)
        await self.client.delete(f"{self.base_path}/{customer_id}")

    async def list(
        self,
        params: CustomerListParams | dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        query = validate_params(CustomerListParams, params).to_payload()
        self.logger.info("Listing customers", extra={"operation": "customers.list"})
        return await self.client.get(self.base_path, params=query or None)
