"""Tool executors and the name-to-handler table used by the dispatcher."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional

import httpx
from pydantic import BaseModel

from ...core.config import ApiConfig
from ...services.store import EstimationStore
from .api_routes import ApiTools
from .base import encode_payload
from .clients import ClientTools
from .estimates import EstimateTools
from .invoices import InvoiceTools
from .schema import SchemaTools

Arguments = Mapping[str, Optional[str]]
ToolHandler = Callable[[Arguments], BaseModel]

logger = logging.getLogger(__name__)


def coerce_arguments(raw: Any) -> Dict[str, Optional[str]]:
    """Normalise ``params.arguments`` into a mapping of strings.

    Numbers become their ``str`` form and booleans ``"true"``/``"false"``;
    ``null`` counts as absent. Objects and arrays are rejected.
    """
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise TypeError("Tool arguments must be a JSON object")

    arguments: Dict[str, Optional[str]] = {}
    for name, value in raw.items():
        if value is None:
            continue
        if isinstance(value, bool):
            arguments[name] = "true" if value else "false"
        elif isinstance(value, (str, int, float)):
            arguments[name] = str(value)
        else:
            raise TypeError(f"Argument '{name}' must be a string, number or boolean")
    return arguments


class ToolExecutors:
    """Binds every registered tool name to the method that runs it."""

    def __init__(
        self,
        store: EstimationStore,
        api_config: ApiConfig,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.clients = ClientTools(store)
        self.estimates = EstimateTools(store)
        self.invoices = InvoiceTools(store)
        self.schema = SchemaTools()
        self.api = ApiTools(api_config, http_client)

        self._handlers: Dict[str, ToolHandler] = {
            "list_clients": lambda args: self.clients.list_clients(),
            "get_client_details": lambda args: self.clients.get_client_details(args.get("client_id", "")),
            "list_estimates": lambda args: self.estimates.list_estimates(args.get("client_id")),
            "get_estimate_details": lambda args: self.estimates.get_estimate_details(
                args.get("estimate_id", "")
            ),
            "create_estimate": lambda args: self.estimates.create_estimate(
                client_id=args.get("client_id", ""),
                title=args.get("title", ""),
                description=args.get("description", ""),
                total_amount=args.get("total_amount", "0"),
                status=args.get("status", "Draft"),
            ),
            "get_estimate_statistics": lambda args: self.estimates.get_estimate_statistics(),
            "list_invoices": lambda args: self.invoices.list_invoices(
                client_id=args.get("client_id"),
                estimate_id=args.get("estimate_id"),
            ),
            "get_client_financial_summary": lambda args: self.invoices.get_client_financial_summary(
                args.get("client_id", "")
            ),
            "update_estimate": lambda args: self.estimates.update_estimate(
                estimate_id=args.get("estimate_id", ""),
                title=args.get("title"),
                description=args.get("description"),
                total_amount=args.get("total_amount"),
                status=args.get("status"),
                valid_until=args.get("valid_until"),
            ),
            "get_database_schema": lambda args: self.schema.get_database_schema(),
            "get_api_routes": lambda args: self.api.get_api_routes(),
        }

    def __contains__(self, name: object) -> bool:
        return name in self._handlers

    def names(self) -> List[str]:
        return list(self._handlers)

    def execute(self, name: str, arguments: Arguments) -> Any:
        """Run ``name`` and return its JSON-ready payload; raises ``KeyError`` for unknown tools."""
        handler = self._handlers[name]
        logger.info("Executing tool %s with arguments=%s", name, dict(arguments))
        return encode_payload(handler(arguments))


__all__ = [
    "ApiTools",
    "ClientTools",
    "EstimateTools",
    "InvoiceTools",
    "SchemaTools",
    "ToolExecutors",
    "coerce_arguments",
]
