# mindbalance/tools/__init__.py
from ..config import ConfigProvider
from .base import Tool, ToolRegistry
from .mind_balance import MindBalanceTool
from .argumentation import SteelmanTool, StrawmanTool, StrawmanToSteelmanTool


def default_registry(provider: ConfigProvider) -> ToolRegistry:
    registry = ToolRegistry()
    registry.register(MindBalanceTool(provider))
    registry.register(SteelmanTool(provider))
    registry.register(StrawmanTool())
    registry.register(StrawmanToSteelmanTool(provider))
    return registry
