from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, Optional

from ..core.config import MCPServerSettings
from .protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    METHOD_NOT_FOUND,
    RequestId,
    RpcError,
    RpcRequest,
    RpcResponse,
    encode_response,
    failure,
    success,
)
from .registry import list_tools
from .tools import ToolExecutors, coerce_arguments

SILENT_NOTIFICATIONS = frozenset({"notifications/initialized", "notifications/cancelled"})

logger = logging.getLogger(__name__)


class RpcDispatcher:
    """Maps one JSON-RPC line to at most one response line.

    Holds no per-request state; every call to :meth:`handle_line` is
    independent of the ones before it.
    """

    def __init__(self, executors: ToolExecutors, settings: MCPServerSettings) -> None:
        self.executors = executors
        self.settings = settings
        self._methods: Dict[str, Callable[[RpcRequest], Any]] = {
            "initialize": self._initialize,
            "tools/list": self._tools_list,
            "tools/call": self._tools_call,
            "prompts/list": lambda request: {"prompts": []},
            "resources/list": lambda request: {"resources": []},
            "ping": lambda request: {},
        }

    def handle_line(self, line: str) -> Optional[str]:
        line = line.strip()
        if not line:
            return None
        try:
            message = json.loads(line)
        except json.JSONDecodeError as exc:
            logger.warning("Ignoring malformed JSON-RPC line: %s", exc)
            return None
        if not isinstance(message, dict):
            logger.warning("Ignoring JSON-RPC line that is not an object")
            return None

        request_id: RequestId = message.get("id")
        try:
            response = self.dispatch(message, request_id)
        except RpcError as exc:
            response = failure(request_id, exc.code, exc.message, exc.data)
        except Exception as exc:
            logger.exception("Error handling JSON-RPC request id=%s", request_id)
            response = failure(request_id, INTERNAL_ERROR, "Internal error", str(exc))

        if response is None:
            return None
        return encode_response(response)

    def dispatch(self, message: Dict[str, Any], request_id: RequestId) -> Optional[RpcResponse]:
        request = RpcRequest.model_validate(message)
        method = request.method
        logger.debug("Received %s (id=%s)", method, request_id)

        if method in SILENT_NOTIFICATIONS:
            return None

        handler = self._methods.get(method)
        if handler is None:
            if request_id is None:
                logger.debug("Ignoring unknown notification %s", method)
                return None
            raise RpcError(METHOD_NOT_FOUND, f"Method not found: {method}")

        return success(request_id, handler(request))

    def _initialize(self, request: RpcRequest) -> Dict[str, Any]:
        logger.info("Client initialized the session")
        return {
            "protocolVersion": self.settings.protocol_version,
            "capabilities": {"tools": {}},
            "serverInfo": {
                "name": self.settings.server_name,
                "version": self.settings.server_version,
            },
        }

    def _tools_list(self, request: RpcRequest) -> Dict[str, Any]:
        return {"tools": [tool.to_payload() for tool in list_tools()]}

    def _tools_call(self, request: RpcRequest) -> Dict[str, Any]:
        params = request.params or {}
        name = params.get("name")
        if not isinstance(name, str) or name not in self.executors:
            raise RpcError(INVALID_PARAMS, f"Unknown tool: {name or ''}")

        payload = self.executors.execute(name, coerce_arguments(params.get("arguments")))
        return {"content": [{"type": "text", "text": json.dumps(payload, indent=2)}]}
