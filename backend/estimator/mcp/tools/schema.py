from __future__ import annotations

from typing import Any, Dict, Iterable, Type

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from sqlalchemy import DateTime, Enum, inspect
from sqlalchemy.orm import Mapper, RelationshipDirection

from ...models import STATUS_DESCRIPTIONS, Base, Client, Estimate, EstimateStatus, Invoice, InvoiceStatus, Money
from .base import guarded

ENTITIES = (Client, Estimate, Invoice)
READ_ONLY_COLUMNS = {"id", "estimate_number", "invoice_number", "created_at", "updated_at"}
ENUM_SUMMARIES = {
    EstimateStatus: "Status of an estimate",
    InvoiceStatus: "Status of an invoice",
}


class DatabaseSchemaDocument(BaseModel):
    openapi: str = "3.0.0"
    info: Dict[str, str]
    components: Dict[str, Dict[str, Any]]


def _column_property(column) -> Dict[str, Any]:
    prop: Dict[str, Any] = {"type": "string"}
    if isinstance(column.type, Enum):
        prop["enum"] = list(column.type.enums)
    elif isinstance(column.type, Money):
        prop = {"type": "number", "format": "decimal"}
    elif isinstance(column.type, DateTime):
        prop["format"] = "date-time"
    elif column.primary_key or column.foreign_keys:
        prop["format"] = "uuid"
    elif column.key == "email":
        prop["format"] = "email"
    else:
        max_length = getattr(column.type, "length", None)
        if max_length:
            prop["maxLength"] = max_length

    if column.doc:
        prop["description"] = column.doc
    if column.key in READ_ONLY_COLUMNS:
        prop["readOnly"] = True
    if column.nullable and not column.primary_key:
        prop["nullable"] = True
    return prop


def _is_required(column) -> bool:
    return (
        not column.nullable
        and column.default is None
        and column.key not in READ_ONLY_COLUMNS
    )


def _entity_schema(mapper: Mapper) -> Dict[str, Any]:
    columns = list(mapper.columns)
    relationships: Dict[str, Any] = {}
    for rel in mapper.relationships:
        many_to_one = rel.direction is RelationshipDirection.MANYTOONE
        entry: Dict[str, Any] = {
            "type": "many-to-one" if many_to_one else "one-to-many",
            "entity": rel.mapper.class_.__name__,
        }
        if rel.doc:
            entry["description"] = rel.doc
        if many_to_one and all(column.nullable for column in rel.local_columns):
            entry["nullable"] = True
        relationships[to_camel(rel.key)] = entry

    return {
        "type": "object",
        "description": (mapper.class_.__doc__ or "").strip(),
        "required": [to_camel(column.key) for column in columns if _is_required(column)],
        "properties": {to_camel(column.key): _column_property(column) for column in columns},
        "relationships": relationships,
    }


def _enum_schema(enum_cls: Type) -> Dict[str, Any]:
    descriptions = STATUS_DESCRIPTIONS[enum_cls]
    return {
        "type": "string",
        "description": ENUM_SUMMARIES[enum_cls],
        "enum": [member.value for member in enum_cls],
        "enumDescriptions": {member.value: descriptions[member] for member in enum_cls},
    }


def build_schema_components(entities: Iterable[Type[Base]] = ENTITIES) -> Dict[str, Any]:
    schemas: Dict[str, Any] = {}
    for entity in entities:
        schemas[entity.__name__] = _entity_schema(inspect(entity))
    for enum_cls in ENUM_SUMMARIES:
        schemas[enum_cls.__name__] = _enum_schema(enum_cls)
    return schemas


class SchemaTools:
    @guarded("Failed to retrieve database schema")
    def get_database_schema(self) -> BaseModel:
        return DatabaseSchemaDocument(
            info={
                "title": "Construction Estimation API Schema",
                "description": "Complete database schema for the Construction Estimation system",
                "version": "1.0.0",
            },
            components={"schemas": build_schema_components()},
        )
