# mindbalance/client.py
from __future__ import annotations

from typing import Any, Dict, Union


class ToolCallFailed(RuntimeError):
    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(f"Tool error ({code}): {message}")
        self.code = code
        self.data = data


class ToolCommand:
    """
    Client-side helper: builds tools/call requests for one tool and unwraps
    the responses.
    """

    def __init__(self, tool_name: str):
        self.tool_name = tool_name

    def build_request(self, request_id: Union[str, int], arguments: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": "tools/call",
            "params": {"name": self.tool_name, "arguments": arguments},
        }

    def parse_response(self, response: Dict[str, Any]) -> Dict[str, Any]:
        if "error" in response:
            err = response["error"]
            raise ToolCallFailed(err.get("code"), err.get("message", ""), err.get("data"))

        result = response.get("result") or {}
        content_type = result.get("contentType")
        if content_type != "application/json":
            raise ValueError(f"Unexpected content type: {content_type}")
        return result["content"]
