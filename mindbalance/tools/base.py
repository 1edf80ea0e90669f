# mindbalance/tools/base.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel


class Tool(ABC):
    """A named request/response tool with a JSON-Schema input contract."""

    name: str
    description: str
    args_model: Type[BaseModel]

    @property
    def definition(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.args_model.model_json_schema(by_alias=True),
        }

    def validate_args(self, arguments: Dict[str, Any]) -> BaseModel:
        # raises pydantic.ValidationError
        return self.args_model.model_validate(arguments)

    @abstractmethod
    def execute(self, args: BaseModel) -> Dict[str, Any]:
        ...


class ToolRegistry:
    def __init__(self):
        self._tools: Dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        self._tools[tool.name] = tool

    def get(self, name: str) -> Optional[Tool]:
        return self._tools.get(name)

    def names(self) -> List[str]:
        return list(self._tools)

    def definitions(self) -> List[Dict[str, Any]]:
        return [tool.definition for tool in self._tools.values()]
