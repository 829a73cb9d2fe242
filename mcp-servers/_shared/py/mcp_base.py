"""
MCP Server Base Classes — Python

Shared foundation for the Python tool servers.
Implements JSON-RPC 2.0 over stdio transport and tool registration.

Usage:
    from mcp_base import MCPServer, MCPTool, MCPResult, MCPError
"""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from json_rpc import error_response, is_notification, is_valid_request, success_response

PROTOCOL_VERSION = "2024-11-05"

_logger = logging.getLogger("mcp_base")

# ─── Type Variables ──────────────────────────────────────────────────────────

TParams = TypeVar("TParams", bound=BaseModel)
TResult = TypeVar("TResult", bound=BaseModel)

# ─── Result & Error Types ────────────────────────────────────────────────────


@dataclass
class MCPResult(Generic[TResult]):
    """Result returned by a tool execution."""

    success: bool
    data: TResult | None = None


class MCPError(Exception):
    """Structured error for MCP tool failures."""

    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code


class ErrorCodes:
    """Standard MCP error codes."""

    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603
    # Custom codes for the annotation server
    SANDBOX_VIOLATION = -32001
    FILE_NOT_FOUND = -32003
    IMAGE_IO_ERROR = -32005


# ─── Tool Base Class ─────────────────────────────────────────────────────────


class MCPTool(ABC, Generic[TParams, TResult]):
    """
    Abstract base class for MCP tools.

    Every tool must define:
    - name: the name clients call it by (e.g., 'annotate_screenshot')
    - description: for the LLM
    - Params type: pydantic BaseModel for input validation
    - Result type: pydantic BaseModel for output structure
    - confirmation_required: whether the host needs user confirmation
    - undo_supported: whether this action can be reversed
    - execute(): the implementation
    """

    name: str = ""
    description: str = ""
    confirmation_required: bool = False
    undo_supported: bool = False

    @abstractmethod
    async def execute(self, params: TParams) -> MCPResult[TResult]:
        """Execute the tool with validated parameters."""
        ...

    def get_params_model(self) -> type[BaseModel]:
        """Get the Pydantic model class for params validation."""
        # Extract from Generic type args
        for base in type(self).__orig_bases__:  # type: ignore[attr-defined]
            if hasattr(base, "__args__") and len(base.__args__) >= 1:
                return base.__args__[0]
        raise TypeError(f"Tool {self.name} must specify Generic params type")

    def get_input_schema(self) -> dict[str, Any]:
        """Generate JSON Schema from the Pydantic params model."""
        model = self.get_params_model()
        return model.model_json_schema(by_alias=True)

    def to_definition(self) -> dict[str, Any]:
        """Generate the MCP tool definition advertised by tools/list."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.get_input_schema(),
            "annotations": {
                "confirmation_required": self.confirmation_required,
                "undo_supported": self.undo_supported,
            },
        }


# ─── MCP Server ──────────────────────────────────────────────────────────────


class MCPServer:
    """
    Base MCP Server.

    Registers tools, handles JSON-RPC over stdio, validates params,
    and dispatches tool calls.

    Usage:
        server = MCPServer(
            name="image-annotator",
            version="1.0.0",
            tools=[AnnotateScreenshot(), GetImageDimensions()],
        )
        server.start()
    """

    def __init__(self, name: str, version: str, tools: list[MCPTool[Any, Any]]) -> None:
        self.name = name
        self.version = version
        self.tools: dict[str, MCPTool[Any, Any]] = {}

        for tool in tools:
            self.tools[tool.name] = tool

    def start(self) -> None:
        """Start the JSON-RPC listener on stdio (blocking)."""
        _logger.info("%s v%s listening on stdio", self.name, self.version)
        asyncio.run(self._run())

    async def _run(self) -> None:
        """Main event loop: read stdin, dispatch, write stdout."""
        reader = asyncio.StreamReader()
        protocol = asyncio.StreamReaderProtocol(reader)
        await asyncio.get_running_loop().connect_read_pipe(lambda: protocol, sys.stdin)

        while True:
            line = await reader.readline()
            if not line:
                break  # stdin closed

            line_str = line.decode("utf-8").strip()
            if not line_str:
                continue

            try:
                request = json.loads(line_str)
            except json.JSONDecodeError:
                self._write(error_response(0, ErrorCodes.PARSE_ERROR, "Invalid JSON"))
                continue

            response = await self._handle_request(request)
            if response:
                self._write(response)

    @staticmethod
    def _write(message: dict[str, Any]) -> None:
        sys.stdout.write(json.dumps(message) + "\n")
        sys.stdout.flush()

    def _build_init_result(self) -> dict[str, Any]:
        """Build the initialization result payload (tool manifest)."""
        tool_defs = [tool.to_definition() for tool in self.tools.values()]
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "serverInfo": {"name": self.name, "version": self.version},
            "capabilities": {"tools": {}},
            "tools": tool_defs,
        }

    async def _handle_request(self, request: dict[str, Any]) -> dict[str, Any] | None:
        """Dispatch a JSON-RPC request."""
        if is_notification(request):
            # e.g. notifications/initialized
            _logger.debug("notification: %s", request.get("method"))
            return None

        request_id = request.get("id", 0) if isinstance(request, dict) else 0
        if not is_valid_request(request):
            return error_response(request_id, ErrorCodes.INVALID_REQUEST, "Invalid request")

        method = request["method"]

        if method == "initialize":
            return success_response(request_id, self._build_init_result())

        if method == "tools/call":
            return await self._handle_tool_call(request)

        if method == "tools/list":
            return self._handle_tool_list(request)

        if method == "ping":
            return success_response(request_id, {"status": "ok"})

        return error_response(request_id, ErrorCodes.METHOD_NOT_FOUND, f"Unknown method: {method}")

    async def _handle_tool_call(self, request: dict[str, Any]) -> dict[str, Any]:
        """Handle a tools/call request."""
        request_id = request.get("id", 0)
        params = request.get("params") or {}
        if not isinstance(params, dict):
            return error_response(request_id, ErrorCodes.INVALID_PARAMS, "params must be an object")
        tool_name = params.get("name", "")
        arguments = params.get("arguments") or {}
        if not isinstance(tool_name, str):
            return error_response(request_id, ErrorCodes.INVALID_PARAMS, "Tool name must be a string")

        tool = self.tools.get(tool_name)
        if not tool:
            return error_response(request_id, ErrorCodes.METHOD_NOT_FOUND, f"Unknown tool: {tool_name}")

        # Validate params
        try:
            params_model = tool.get_params_model()
            validated_params = params_model.model_validate(arguments)
        except ValidationError as e:
            return error_response(request_id, ErrorCodes.INVALID_PARAMS, f"Invalid parameters: {e}")

        # Execute tool
        try:
            result = await tool.execute(validated_params)
            result_data = result.data
            if isinstance(result_data, BaseModel):
                result_data = result_data.model_dump()

            return success_response(
                request_id,
                {"content": [{"type": "text", "text": json.dumps(result_data)}]},
            )
        except MCPError as e:
            return error_response(request_id, e.code, str(e))
        except ValueError as e:
            return error_response(request_id, ErrorCodes.INVALID_PARAMS, str(e))
        except Exception as e:
            _logger.exception("Tool %s failed", tool_name)
            return error_response(request_id, ErrorCodes.INTERNAL_ERROR, f"Internal error: {e!s}")

    def _handle_tool_list(self, request: dict[str, Any]) -> dict[str, Any]:
        """Handle a tools/list request."""
        tool_defs = [tool.to_definition() for tool in self.tools.values()]
        return success_response(request.get("id", 0), {"tools": tool_defs})
