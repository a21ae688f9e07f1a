"""Usage resource: records billable usage events."""

from collections.abc import Mapping
from typing import Any

from revmax.api import ApiClient
from revmax.resources.models import UsageRecord, validate_params


class Usage:
    """Usage tracking endpoints under ``/usage``."""

    base_path = "/usage"

    def __init__(self, client: ApiClient):
        self.client = client
        self.logger = client.logger

    async def track_event(self, params: UsageRecord | Mapping[str, Any]) -> dict[str, Any]:
        """
        Record usage for one event or a batch.

        Accepts a single UsageRecord (or mapping), or ``{"records": [...]}``.
        Everything is sent as a batch; for a single record whose result
        succeeded, that record's ``responseData`` is returned instead of the
        batch envelope.

        Args:
            params: Single record or batch

        Returns:
            Single event response or batch response

        Raises:
            ValidationError: If a record is invalid
            RevMaxError: If the API call fails
        """
        if isinstance(params, Mapping) and "records" in params:
            records = [validate_params(UsageRecord, r).to_payload() for r in params["records"]]
            self.logger.info(
                "Recording batch usage for %d records",
                len(records),
                extra={"operation": "usage.track_event"},
            )
            return await self.client.post(f"{self.base_path}/record", {"records": records})

        record = validate_params(UsageRecord, params)
        self.logger.info(
            "Recording usage",
            extra={
                "operation": "usage.track_event",
                "data": {
                    "agent": record.agent_id,
                    "customer": record.customer_external_id,
                    "signal": record.signal_name,
                    "quantity": record.quantity,
                },
            },
        )

        response = await self.client.post(
            f"{self.base_path}/record", {"records": [record.to_payload()]}
        )

        results = response.get("results") if isinstance(response, dict) else None
        if results and len(results) == 1:
            first = results[0]
            if first.get("success") and first.get("responseData"):
                return first["responseData"]

        return response
