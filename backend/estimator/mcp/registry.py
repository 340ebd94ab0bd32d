from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class ToolParameter(BaseModel):
    type: str = "string"
    description: str


class ToolInputSchema(BaseModel):
    type: str = "object"
    properties: Dict[str, ToolParameter] = Field(default_factory=dict)
    required: Optional[List[str]] = None


class ToolDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: ToolInputSchema = Field(alias="inputSchema")

    def to_payload(self) -> Dict[str, object]:
        return self.model_dump(by_alias=True, exclude_none=True)


def _tool(
    name: str,
    description: str,
    properties: Dict[str, str] | None = None,
    required: List[str] | None = None,
) -> ToolDescriptor:
    schema = ToolInputSchema(
        properties={
            key: ToolParameter(description=text) for key, text in (properties or {}).items()
        },
        required=required or None,
    )
    return ToolDescriptor(name=name, description=description, inputSchema=schema)


TOOLS: Tuple[ToolDescriptor, ...] = (
    _tool("list_clients", "Get all clients with basic information"),
    _tool(
        "get_client_details",
        "Get detailed client information including estimates and invoices",
        {"client_id": "The GUID of the client"},
        ["client_id"],
    ),
    _tool(
        "list_estimates",
        "Get all estimates with optional client filter",
        {"client_id": "Optional: Filter by client GUID"},
    ),
    _tool(
        "get_estimate_details",
        "Get detailed information about a specific estimate",
        {"estimate_id": "The GUID of the estimate"},
        ["estimate_id"],
    ),
    _tool(
        "create_estimate",
        "Create a new estimate for a client",
        {
            "client_id": "The GUID of the client",
            "title": "Title of the estimate",
            "description": "Detailed description of the work",
            "total_amount": "Total amount in decimal format",
            "status": "Status: Draft, Sent, Approved, or Rejected",
        },
        ["client_id", "title", "description", "total_amount"],
    ),
    _tool(
        "get_estimate_statistics",
        "Get statistics about estimates (counts, averages, status breakdown)",
    ),
    _tool(
        "list_invoices",
        "Get all invoices with optional filters",
        {
            "client_id": "Optional: Filter by client GUID",
            "estimate_id": "Optional: Filter by estimate GUID",
        },
    ),
    _tool(
        "get_client_financial_summary",
        "Get comprehensive financial summary for a client",
        {"client_id": "The GUID of the client"},
        ["client_id"],
    ),
    _tool(
        "update_estimate",
        "Update an existing estimate (title, description, totalAmount, status, validUntil)",
        {
            "estimate_id": "The GUID of the estimate to update",
            "title": "Optional: New title for the estimate",
            "description": "Optional: New description",
            "total_amount": "Optional: New total amount in decimal format",
            "status": "Optional: New status (Draft, Sent, Approved, or Rejected)",
            "valid_until": "Optional: New valid until date (ISO 8601 format)",
        },
        ["estimate_id"],
    ),
    _tool(
        "get_database_schema",
        "Get the complete database schema in OpenAPI/JSON Schema format for front-end development",
    ),
    _tool(
        "get_api_routes",
        "Get the complete REST API routes from the live OpenAPI endpoint with full request/response models",
    ),
)

_BY_NAME: Dict[str, ToolDescriptor] = {tool.name: tool for tool in TOOLS}


def list_tools() -> List[ToolDescriptor]:
    return list(TOOLS)


def get_tool(name: str | None) -> Optional[ToolDescriptor]:
    if name is None:
        return None
    return _BY_NAME.get(name)
