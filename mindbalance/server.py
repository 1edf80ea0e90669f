# mindbalance/server.py
"""
JSON-RPC 2.0 dispatcher shared by the HTTP route and the stdio transport.

Methods: initialize, ping, tools/list, tools/call. Requests without an
``id`` are notifications and get no response.
"""
from __future__ import annotations

import json
from functools import lru_cache
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from .config import get_config_provider
from .engine.errors import ScoringInputError
from .logging_config import log_event, log_failure, logger
from .schemas import JsonRpcRequest, ToolsCallParams
from .settings import get_settings
from .tools import ToolRegistry, default_registry

JSONRPC = "2.0"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603
TOOL_NOT_FOUND = -32001
TOOL_EXECUTION_ERROR = -32002
INVALID_ARGUMENTS = -32003

Message = Dict[str, Any]


class RpcError(Exception):
    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(message)
        self.code = code
        self.message = message
        self.data = data


def error_response(request_id: Any, code: int, message: str, data: Any = None) -> Message:
    error: Dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return {"jsonrpc": JSONRPC, "id": request_id, "error": error}


def success_response(request_id: Any, result: Any) -> Message:
    return {"jsonrpc": JSONRPC, "id": request_id, "result": result}


def _validation_details(e: ValidationError) -> List[Dict[str, Any]]:
    return [
        {"loc": [str(part) for part in err["loc"]], "msg": err["msg"], "type": err["type"]}
        for err in e.errors()
    ]


class ToolServer:
    def __init__(
        self,
        registry: ToolRegistry,
        name: str,
        version: str,
        protocol_version: str = "2024-11-05",
        single_session: bool = True,
    ):
        self.registry = registry
        self.name = name
        self.version = version
        self.protocol_version = protocol_version
        # stdio owns one client session; HTTP callers share this object and each may initialize
        self.single_session = single_session
        self.initialized = False

    # -------------------------
    # ENTRY POINTS
    # -------------------------
    def handle_text(self, body: Union[str, bytes]) -> Optional[Union[Message, List[Message]]]:
        try:
            payload = json.loads(body)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            log_failure("PARSE_ERROR", {"detail": str(e)})
            return error_response(None, PARSE_ERROR, "Parse error")
        return self.handle_payload(payload)

    def handle_payload(self, payload: Any) -> Optional[Union[Message, List[Message]]]:
        if isinstance(payload, list):
            if not payload:
                return error_response(None, INVALID_REQUEST, "Empty batch")
            responses = [r for r in (self.handle_message(m) for m in payload) if r is not None]
            return responses or None
        return self.handle_message(payload)

    def handle_message(self, message: Any) -> Optional[Message]:
        if not isinstance(message, dict):
            return error_response(None, INVALID_REQUEST, "Request must be a JSON object")

        is_notification = "id" not in message
        request_id = message.get("id")
        try:
            request = JsonRpcRequest.model_validate(message)
        except ValidationError as e:
            return error_response(
                request_id if isinstance(request_id, (str, int)) else None,
                INVALID_REQUEST,
                "Invalid request",
                _validation_details(e),
            )

        try:
            result = self.dispatch(request)
        except RpcError as e:
            response = error_response(request_id, e.code, e.message, e.data)
        except Exception as e:
            logger.exception(f"Unhandled error in {request.method}: {e}")
            response = error_response(request_id, INTERNAL_ERROR, str(e) or "Internal error")
        else:
            response = success_response(request_id, result)

        return None if is_notification else response

    # -------------------------
    # METHODS
    # -------------------------
    def dispatch(self, request: JsonRpcRequest) -> Any:
        if request.method == "initialize":
            return self.initialize()
        if request.method == "ping":
            return {}
        if request.method == "tools/list":
            return {"tools": self.registry.definitions()}
        if request.method == "tools/call":
            return self.call_tool(request.params)
        raise RpcError(METHOD_NOT_FOUND, f"Unknown method: {request.method}")

    def initialize(self) -> Dict[str, Any]:
        if self.single_session and self.initialized:
            raise RpcError(INVALID_REQUEST, "Server already initialized")
        self.initialized = True
        log_event("INITIALIZE", "client session initialized", {"server": self.name})
        return {
            "protocolVersion": self.protocol_version,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": self.name, "version": self.version},
        }

    def call_tool(self, params: Any) -> Dict[str, Any]:
        if not isinstance(params, dict):
            raise RpcError(INVALID_PARAMS, "tools/call expects an object with 'name' and 'arguments'")
        try:
            call = ToolsCallParams.model_validate(params)
        except ValidationError as e:
            raise RpcError(INVALID_PARAMS, "Invalid tools/call params", _validation_details(e))

        tool = self.registry.get(call.name)
        if tool is None:
            raise RpcError(TOOL_NOT_FOUND, f"Tool not found: {call.name}")

        try:
            args = tool.validate_args(call.arguments)
        except ValidationError as e:
            details = _validation_details(e)
            log_failure("INVALID_ARGUMENTS", {"tool": call.name, "errors": details})
            raise RpcError(INVALID_ARGUMENTS, f"Invalid arguments for {call.name}", {"errors": details})

        try:
            content = tool.execute(args)
        except ScoringInputError as e:
            log_failure(e.code, {"tool": call.name, **e.to_dict()})
            raise RpcError(INVALID_ARGUMENTS, str(e), e.to_dict())
        except Exception as e:
            logger.exception(f"Tool {call.name} failed: {e}")
            raise RpcError(TOOL_EXECUTION_ERROR, str(e) or "Tool execution failed")

        log_event("TOOL_CALL", f"{call.name} ok", {"tool": call.name})
        return {"contentType": "application/json", "content": content}


def build_tool_server(single_session: bool) -> ToolServer:
    settings = get_settings()
    provider = get_config_provider()
    return ToolServer(
        default_registry(provider),
        name=provider.config.server.name,
        version=provider.config.server.version,
        protocol_version=settings.PROTOCOL_VERSION,
        single_session=single_session,
    )


@lru_cache
def get_tool_server() -> ToolServer:
    """Process-wide server for the HTTP route; initialize is answered without session state."""
    return build_tool_server(single_session=False)
