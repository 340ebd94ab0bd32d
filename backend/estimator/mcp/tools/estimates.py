from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel

from ...models import Estimate, EstimateStatus, utcnow
from ...schemas.tools import (
    CreatedEstimate,
    EstimateDetail,
    EstimateList,
    EstimateListItem,
    EstimateMutationResult,
    EstimateStatistics,
    EstimateStatusBreakdown,
    RecentEstimate,
    RelatedInvoice,
    ToolError,
    ToolMessage,
    UpdatedEstimate,
)
from ...services.numbering import ESTIMATE_PREFIX, current_year, next_sequence_number, year_prefix
from ...services.store import EstimationStore
from ...utils.parsing import (
    Err,
    enum_values,
    parse_datetime,
    parse_decimal,
    parse_enum,
    parse_optional_uuid,
    parse_uuid,
)
from .base import group_by_status, guarded, money_sum, status_value

ESTIMATE_VALIDITY = dt.timedelta(days=30)
RECENT_ESTIMATES_LIMIT = 5

logger = logging.getLogger(__name__)


def recent_estimate(estimate: Estimate) -> RecentEstimate:
    return RecentEstimate(
        estimate_number=estimate.estimate_number,
        title=estimate.title,
        total_amount=estimate.total_amount,
        status=status_value(estimate.status),
        created_at=estimate.created_at,
    )


class EstimateTools:
    def __init__(self, store: EstimationStore) -> None:
        self.store = store

    @guarded("Failed to retrieve estimates")
    def list_estimates(self, client_id: Optional[str] = None) -> BaseModel:
        # An unparsable filter lists everything.
        estimates = self.store.list_estimates(client_id=parse_optional_uuid(client_id))
        return EstimateList(
            [
                EstimateListItem(
                    id=estimate.id,
                    client_id=estimate.client_id,
                    estimate_number=estimate.estimate_number,
                    title=estimate.title,
                    description=estimate.description,
                    total_amount=estimate.total_amount,
                    status=status_value(estimate.status),
                    valid_until=estimate.valid_until,
                    created_at=estimate.created_at,
                )
                for estimate in estimates
            ]
        )

    @guarded("Failed to retrieve estimate details")
    def get_estimate_details(self, estimate_id: str) -> BaseModel:
        parsed = parse_uuid(estimate_id)
        if isinstance(parsed, Err):
            return ToolError(error="Invalid estimate ID format")

        estimate = self.store.get_estimate(parsed.value, with_related=True)
        if estimate is None:
            return ToolError(error="Estimate not found")

        return EstimateDetail(
            id=estimate.id,
            client_id=estimate.client_id,
            client_name=estimate.client.name if estimate.client is not None else "",
            estimate_number=estimate.estimate_number,
            title=estimate.title,
            description=estimate.description,
            total_amount=estimate.total_amount,
            status=status_value(estimate.status),
            valid_until=estimate.valid_until,
            created_at=estimate.created_at,
            updated_at=estimate.updated_at,
            related_invoices=[
                RelatedInvoice(
                    id=invoice.id,
                    invoice_number=invoice.invoice_number,
                    amount=invoice.amount,
                    status=status_value(invoice.status),
                )
                for invoice in estimate.invoices
            ],
        )

    @guarded("Failed to create estimate")
    def create_estimate(
        self,
        client_id: str,
        title: str,
        description: str,
        total_amount: str,
        status: str = EstimateStatus.DRAFT.value,
    ) -> BaseModel:
        parsed_client = parse_uuid(client_id)
        if isinstance(parsed_client, Err):
            return ToolError(error="Invalid client ID format")

        amount = parse_decimal(total_amount)
        if isinstance(amount, Err):
            return ToolError(error="Invalid total amount format")

        if not self.store.client_exists(parsed_client.value):
            return ToolError(error="Client not found")

        parsed_status = parse_enum(EstimateStatus, status)
        estimate_status = EstimateStatus.DRAFT if isinstance(parsed_status, Err) else parsed_status.value

        year = current_year()
        latest = self.store.latest_estimate_number(year_prefix(ESTIMATE_PREFIX, year))
        now = utcnow()
        estimate = self.store.create_estimate(
            client_id=parsed_client.value,
            estimate_number=next_sequence_number(ESTIMATE_PREFIX, year, latest),
            title=title,
            description=description,
            total_amount=amount.value,
            status=estimate_status,
            valid_until=now + ESTIMATE_VALIDITY,
            created_at=now,
            updated_at=now,
        )
        logger.info("Created estimate %s for client %s", estimate.estimate_number, estimate.client_id)

        return EstimateMutationResult(
            message="Estimate created successfully",
            estimate=CreatedEstimate(
                id=estimate.id,
                estimate_number=estimate.estimate_number,
                title=estimate.title,
                description=estimate.description,
                total_amount=estimate.total_amount,
                status=status_value(estimate.status),
                valid_until=estimate.valid_until,
                created_at=estimate.created_at,
            ),
        )

    @guarded("Failed to update estimate")
    def update_estimate(
        self,
        estimate_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        total_amount: Optional[str] = None,
        status: Optional[str] = None,
        valid_until: Optional[str] = None,
    ) -> BaseModel:
        """Apply the non-empty fields to an estimate.

        Every supplied value is validated before anything is written, so a bad
        status or date leaves the estimate untouched. ``UpdatedAt`` is refreshed
        even when no field changes.
        """
        parsed_id = parse_uuid(estimate_id)
        if isinstance(parsed_id, Err):
            return ToolError(error="Invalid estimate ID format")

        if not self.store.estimate_exists(parsed_id.value):
            return ToolError(error="Estimate not found")

        changes: Dict[str, Any] = {}
        if title:
            changes["title"] = title
        if description:
            changes["description"] = description

        if total_amount:
            amount = parse_decimal(total_amount)
            if isinstance(amount, Err):
                return ToolError(error="Invalid total amount format")
            changes["total_amount"] = amount.value

        if status:
            parsed_status = parse_enum(EstimateStatus, status)
            if isinstance(parsed_status, Err):
                return ToolError(error=f"Invalid status. Valid values are: {enum_values(EstimateStatus)}")
            changes["status"] = parsed_status.value

        if valid_until:
            parsed_date = parse_datetime(valid_until)
            if isinstance(parsed_date, Err):
                return ToolError(error="Invalid validUntil date format")
            changes["valid_until"] = parsed_date.value

        estimate = self.store.update_estimate(parsed_id.value, **changes)
        if estimate is None:
            return ToolError(error="Estimate not found")
        logger.info("Updated estimate %s fields=%s", estimate.estimate_number, sorted(changes))

        return EstimateMutationResult(
            message="Estimate updated successfully",
            estimate=UpdatedEstimate(
                id=estimate.id,
                estimate_number=estimate.estimate_number,
                title=estimate.title,
                description=estimate.description,
                total_amount=estimate.total_amount,
                status=status_value(estimate.status),
                valid_until=estimate.valid_until,
                created_at=estimate.created_at,
                updated_at=estimate.updated_at,
            ),
        )

    @guarded("Failed to retrieve estimate statistics")
    def get_estimate_statistics(self) -> BaseModel:
        estimates = self.store.list_estimates()
        if not estimates:
            return ToolMessage(message="No estimates found")

        total_value = money_sum(estimate.total_amount for estimate in estimates)
        breakdown = sorted(
            group_by_status(estimates, "total_amount"),
            key=lambda group: group[1],
            reverse=True,
        )
        return EstimateStatistics(
            total_estimates=len(estimates),
            total_value=total_value,
            average_value=total_value / Decimal(len(estimates)),
            status_breakdown=[
                EstimateStatusBreakdown(status=status, count=count, total_value=value)
                for status, count, value in breakdown
            ],
            recent_estimates=[recent_estimate(estimate) for estimate in estimates[:RECENT_ESTIMATES_LIMIT]],
        )
