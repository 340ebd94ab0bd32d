"""JSON-RPC 2.0 envelopes exchanged over the stdio transport.

Every outgoing message is built as one of the typed envelopes below and
rendered by :func:`encode_response`, which emits compact single-line JSON.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, model_serializer

JSONRPC_VERSION = "2.0"

METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Echoed back verbatim, whatever JSON value the client sent.
RequestId = Any


class RpcRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    jsonrpc: Optional[str] = JSONRPC_VERSION
    id: RequestId = None
    method: str
    params: Optional[Dict[str, Any]] = None

    @property
    def is_notification(self) -> bool:
        return self.id is None


class RpcErrorObject(BaseModel):
    code: int
    message: str
    data: Optional[Any] = None

    @model_serializer(mode="wrap")
    def _omit_missing_data(self, handler):  # type: ignore[no-untyped-def]
        payload = handler(self)
        if payload.get("data") is None:
            payload.pop("data", None)
        return payload


class RpcSuccess(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    id: RequestId = None
    result: Any


class RpcFailure(BaseModel):
    jsonrpc: str = JSONRPC_VERSION
    id: RequestId = None
    error: RpcErrorObject


RpcResponse = Union[RpcSuccess, RpcFailure]


class RpcError(Exception):
    """Raised by method handlers to answer with a JSON-RPC error object."""

    def __init__(self, code: int, message: str, data: Any = None) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


def success(request_id: RequestId, result: Any) -> RpcSuccess:
    return RpcSuccess(id=request_id, result=result)


def failure(request_id: RequestId, code: int, message: str, data: Any = None) -> RpcFailure:
    return RpcFailure(id=request_id, error=RpcErrorObject(code=code, message=message, data=data))


def encode_response(response: RpcResponse) -> str:
    return response.model_dump_json()
