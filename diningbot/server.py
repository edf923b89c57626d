"""Model Context Protocol server exposing dining hall menu tools."""

import argparse
import json
import logging
import os
import sys
from datetime import date, timedelta
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

from diningbot.client import DiningHallClient
from diningbot.config import (
    VALID_LOCATIONS,
    VALID_MEAL_TYPES,
    is_valid_location,
    is_valid_meal_type,
)
from diningbot.dates import format_date, parse_date

logger = logging.getLogger(__name__)

SERVER_NAME = "diningbot"
SERVER_VERSION = "1.0.0"
LATEST_PROTOCOL_VERSION = "2025-06-18"
SUPPORTED_PROTOCOL_VERSIONS = ("2024-11-05", "2025-03-26", "2025-06-18")
DEFAULT_DAYS = 7
MAX_DAYS = 30
MCP_PATH = "/mcp"
BANNER = (
    "DiningBot MCP Server\n\n"
    "Connect to /mcp for Streamable HTTP transport (MCP 2025-06-18)\n"
)

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ToolError(Exception):
    """A tool failed; reported to the caller as an error result, not a protocol error."""

    def __init__(self, message, output=None):
        super().__init__(message)
        self.output = output


class _RpcError(Exception):
    def __init__(self, code, message):
        super().__init__(message)
        self.code = code


def tool_definitions():
    """Return the definitions of the tools this server offers."""
    location = {
        "type": "string",
        "description": "The dining hall location name",
        "enum": list(VALID_LOCATIONS),
    }
    meal_type = {
        "type": "string",
        "description": "The meal type",
        "enum": list(VALID_MEAL_TYPES),
    }
    return [
        {
            "name": "get_menu",
            "description": (
                "Get the menu for a specific dining hall location, date, and meal type"
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "location": dict(location),
                    "date": {
                        "type": "string",
                        "description": (
                            "Date in M/D/YYYY format (e.g., 1/15/2025). "
                            "If not provided, uses today's date"
                        ),
                    },
                    "mealType": dict(meal_type),
                },
                "required": ["location", "mealType"],
            },
        },
        {
            "name": "get_menus_range",
            "description": (
                "Get menus for multiple days for a specific dining hall location "
                "and meal type"
            ),
            "inputSchema": {
                "type": "object",
                "properties": {
                    "location": dict(location),
                    "mealType": dict(meal_type),
                    "days": {
                        "type": "integer",
                        "description": "Number of days to fetch (default: 7, max: 30)",
                    },
                    "startDate": {
                        "type": "string",
                        "description": (
                            "Start date in M/D/YYYY format. "
                            "If not provided, uses today's date"
                        ),
                    },
                },
                "required": ["location", "mealType"],
            },
            "outputSchema": {
                "type": "object",
                "properties": {
                    "location": {"type": "string"},
                    "mealType": {"type": "string"},
                    "menus": {
                        "type": "object",
                        "additionalProperties": {
                            "type": "array",
                            "items": {"type": "string"},
                        },
                    },
                },
            },
        },
    ]


def _is_integer(value) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, int):
        return True
    return isinstance(value, float) and value.is_integer()


def _validate_arguments(schema, arguments) -> None:
    if not isinstance(arguments, dict):
        raise ValueError("arguments must be an object")
    for name in schema.get("required", ()):
        if name not in arguments:
            raise ValueError(f"missing required argument {name!r}")
    for name, value in arguments.items():
        prop = schema["properties"].get(name)
        if prop is None:
            continue
        expected = prop["type"]
        if expected == "string" and not isinstance(value, str):
            raise ValueError(f"argument {name!r} must be a string")
        if expected == "integer" and not _is_integer(value):
            raise ValueError(f"argument {name!r} must be an integer")
        if "enum" in prop and value not in prop["enum"]:
            raise ValueError(f"argument {name!r}: {value!r} is not an allowed value")


def _error_response(msg_id, code, message):
    return {"jsonrpc": "2.0", "id": msg_id, "error": {"code": code, "message": message}}


class MenuServer:
    """Answers MCP requests for dining hall menus."""

    def __init__(self, client=None):
        self._client = client
        self._tools = {tool["name"]: tool for tool in tool_definitions()}

    @property
    def client(self):
        if self._client is None:
            self._client = DiningHallClient()
        return self._client

    def _validate(self, location, meal_type):
        if not is_valid_location(location):
            raise ToolError(f"Invalid location: {location}")
        if not is_valid_meal_type(meal_type):
            raise ToolError(f"Invalid meal type: {meal_type}")

    def get_menu(self, location, meal_type, date=None):
        """Return the menu output for one day; today when no date is given."""
        self._validate(location, meal_type)
        day = date or format_date(_today())
        output = {"location": location, "date": day, "mealType": meal_type}
        try:
            items = self.client.get_menu(location, day, meal_type)
        except (ValueError, RuntimeError, OSError) as exc:
            output["items"] = []
            output["error"] = str(exc)
            raise ToolError(f"Error fetching menu: {exc}", output) from exc
        output["items"] = list(items or [])
        return output

    def get_menus_range(self, location, meal_type, days=None, start_date=None):
        """Return menus for consecutive days, keyed by M/D/YYYY date."""
        self._validate(location, meal_type)
        count = int(days or 0)
        if count <= 0:
            count = DEFAULT_DAYS
        count = min(count, MAX_DAYS)

        if start_date:
            try:
                start = parse_date(start_date)
            except ValueError as exc:
                raise ToolError(
                    f"Invalid start date format. Use M/D/YYYY format: {exc}"
                ) from exc
        else:
            start = _today()

        menus = {}
        for offset in range(count):
            day = format_date(start + timedelta(days=offset))
            try:
                items = self.client.get_menu(location, day, meal_type)
            except (ValueError, RuntimeError, OSError):
                items = []
            menus[day] = list(items or [])
        return {"location": location, "mealType": meal_type, "menus": menus}

    def list_tools(self):
        """Return the tool definitions."""
        return list(self._tools.values())

    def call_tool(self, name, arguments=None):
        """Run a tool and return an MCP tool result.

        Raises ValueError for an unknown tool or arguments that break its schema.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ValueError(f"unknown tool {name!r}")
        args = {} if arguments is None else arguments
        _validate_arguments(tool["inputSchema"], args)
        try:
            if name == "get_menu":
                output = self.get_menu(
                    args["location"], args["mealType"], args.get("date")
                )
            else:
                output = self.get_menus_range(
                    args["location"],
                    args["mealType"],
                    args.get("days"),
                    args.get("startDate"),
                )
        except ToolError as exc:
            result = {"content": [{"type": "text", "text": str(exc)}], "isError": True}
            if exc.output is not None:
                result["structuredContent"] = exc.output
            return result
        return {
            "content": [{"type": "text", "text": json.dumps(output)}],
            "structuredContent": output,
            "isError": False,
        }

    def _initialize(self, params):
        requested = params.get("protocolVersion")
        version = (
            requested
            if requested in SUPPORTED_PROTOCOL_VERSIONS
            else LATEST_PROTOCOL_VERSION
        )
        return {
            "protocolVersion": version,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
        }

    def _dispatch(self, method, params):
        if not isinstance(params, dict):
            raise _RpcError(INVALID_PARAMS, "params must be an object")
        if method == "initialize":
            return self._initialize(params)
        if method == "ping":
            return {}
        if method == "tools/list":
            return {"tools": self.list_tools()}
        if method == "tools/call":
            name = params.get("name")
            if not isinstance(name, str):
                raise _RpcError(INVALID_PARAMS, "tool name must be a string")
            try:
                return self.call_tool(name, params.get("arguments"))
            except ValueError as exc:
                raise _RpcError(INVALID_PARAMS, str(exc)) from exc
        if method.startswith("notifications/"):
            return {}
        raise _RpcError(METHOD_NOT_FOUND, f"method not found: {method}")

    def handle_message(self, message):
        """Handle one JSON-RPC message; return the response, or None when none is due."""
        if not isinstance(message, dict) or message.get("jsonrpc") != "2.0":
            return _error_response(None, INVALID_REQUEST, "invalid JSON-RPC message")
        method = message.get("method")
        if method is None:
            return None
        is_request = "id" in message
        msg_id = message.get("id")
        if not isinstance(method, str):
            return _error_response(msg_id, INVALID_REQUEST, "method must be a string")
        try:
            result = self._dispatch(method, message.get("params") or {})
        except _RpcError as exc:
            return _error_response(msg_id, exc.code, str(exc)) if is_request else None
        except Exception as exc:  # a fault in a handler must not kill the transport
            logger.exception("error handling %s", method)
            return _error_response(msg_id, INTERNAL_ERROR, str(exc)) if is_request else None
        if not is_request:
            return None
        return {"jsonrpc": "2.0", "id": msg_id, "result": result}

    def _handle_payload(self, payload):
        if isinstance(payload, list):
            if not payload:
                return _error_response(None, INVALID_REQUEST, "empty batch")
            responses = [r for r in map(self.handle_message, payload) if r is not None]
            return responses or None
        return self.handle_message(payload)

    def serve_stdio(self, stdin=None, stdout=None):
        """Serve newline-delimited JSON-RPC messages until the input ends."""
        stdin = sys.stdin if stdin is None else stdin
        stdout = sys.stdout if stdout is None else stdout
        for line in stdin:
            line = line.strip()
            if not line:
                continue
            try:
                payload = json.loads(line)
            except json.JSONDecodeError:
                response = _error_response(None, PARSE_ERROR, "parse error")
            else:
                response = self._handle_payload(payload)
            if response is not None:
                stdout.write(json.dumps(response) + "\n")
                stdout.flush()

    def make_http_server(self, host, port):
        """Build an HTTP server with the MCP endpoint at /mcp and a banner elsewhere."""
        menu_server = self

        class _Handler(BaseHTTPRequestHandler):
            def _send(self, status, body, content_type, headers=()):
                self.send_response(status)
                self.send_header("Content-Type", content_type)
                self.send_header("Content-Length", str(len(body)))
                for key, value in headers:
                    self.send_header(key, value)
                self.end_headers()
                self.wfile.write(body)

            def _path(self):
                return self.path.split("?", 1)[0]

            def _banner(self):
                self._send(HTTPStatus.OK, BANNER.encode(), "text/plain")

            def do_GET(self):
                if self._path() == MCP_PATH:
                    self._send(
                        HTTPStatus.METHOD_NOT_ALLOWED,
                        b"",
                        "text/plain",
                        [("Allow", "POST")],
                    )
                else:
                    self._banner()

            def do_POST(self):
                if self._path() != MCP_PATH:
                    self._banner()
                    return
                length = int(self.headers.get("Content-Length") or 0)
                body = self.rfile.read(length)
                try:
                    payload = json.loads(body)
                except (json.JSONDecodeError, UnicodeDecodeError):
                    response = _error_response(None, PARSE_ERROR, "parse error")
                    self._send(
                        HTTPStatus.BAD_REQUEST,
                        json.dumps(response).encode(),
                        "application/json",
                    )
                    return
                response = menu_server._handle_payload(payload)
                if response is None:
                    self._send(HTTPStatus.ACCEPTED, b"", "text/plain")
                else:
                    self._send(
                        HTTPStatus.OK, json.dumps(response).encode(), "application/json"
                    )

            def log_message(self, format, *args):
                logger.info("%s %s", self.address_string(), format % args)

        return ThreadingHTTPServer((host, port), _Handler)


def _today():
    return date.today()


def main(argv=None):
    """Run over stdin/stdout, or over HTTP when a port is given (or PORT is set)."""
    parser = argparse.ArgumentParser(
        prog="diningbot", description="Dining hall menu MCP server."
    )
    parser.add_argument("--port", default=os.environ.get("PORT", ""))
    parser.add_argument("--bind", default=os.environ.get("BIND_ADDR") or "127.0.0.1")
    args = parser.parse_args(argv)
    logging.basicConfig(level=logging.INFO, stream=sys.stderr)

    server = MenuServer()
    if not args.port:
        server.serve_stdio()
        return 0

    try:
        port = int(args.port)
    except ValueError:
        parser.error(f"invalid port: {args.port}")
    httpd = server.make_http_server(args.bind, port)
    address = f"{args.bind}:{port}"
    logger.info("MCP server listening on %s", address)
    logger.info("Streamable HTTP endpoint: http://%s%s", address, MCP_PATH)
    logger.info("Protocol: MCP %s (Streamable HTTP)", LATEST_PROTOCOL_VERSION)
    with httpd:
        try:
            httpd.serve_forever()
        except KeyboardInterrupt:
            pass
    return 0


if __name__ == "__main__":
    sys.exit(main())