from __future__ import annotations

import io
import json
import os
import subprocess
import sys
from pathlib import Path

from backend.estimator.core.config import ApiConfig, MCPServerSettings
from backend.estimator.mcp.dispatcher import RpcDispatcher
from backend.estimator.mcp.server import McpStdioServer
from backend.estimator.mcp.tools import ToolExecutors

ROOT_DIR = Path(__file__).resolve().parents[1]


def _requests(*messages):
    return "".join((m if isinstance(m, str) else json.dumps(m)) + "\n" for m in messages)


def test_loop_writes_one_line_per_response(store):
    dispatcher = RpcDispatcher(ToolExecutors(store, ApiConfig(base_url="http://api.test")), MCPServerSettings())
    stdin = io.StringIO(
        _requests(
            {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}},
            {"jsonrpc": "2.0", "method": "notifications/initialized"},
            "this is not json",
            {"jsonrpc": "2.0", "id": 2, "method": "ping"},
            {"jsonrpc": "2.0", "id": 3, "method": "tools/list"},
        )
    )
    stdout = io.StringIO()

    McpStdioServer(dispatcher, stdin, stdout).serve_forever()

    lines = stdout.getvalue().splitlines()
    assert [json.loads(line)["id"] for line in lines] == [1, 2, 3]
    assert lines[1] == '{"jsonrpc":"2.0","id":2,"result":{}}'


def test_loop_returns_on_empty_input(store):
    dispatcher = RpcDispatcher(ToolExecutors(store, ApiConfig(base_url="http://api.test")), MCPServerSettings())
    stdout = io.StringIO()
    McpStdioServer(dispatcher, io.StringIO(""), stdout).serve_forever()
    assert stdout.getvalue() == ""


def test_stdio_server_process_speaks_json_only(tmp_path):
    env = dict(os.environ)
    env["ESTIMATOR_DB_PATH"] = str(tmp_path / "mcp.db")
    env["ESTIMATOR_SEED_ON_STARTUP"] = "true"
    env["PYTHONPATH"] = str(ROOT_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    stdin = _requests(
        {"jsonrpc": "2.0", "id": 1, "method": "initialize", "params": {}},
        {"jsonrpc": "2.0", "method": "notifications/initialized"},
        {"jsonrpc": "2.0", "id": 2, "method": "tools/list"},
        {"jsonrpc": "2.0", "id": 3, "method": "tools/call", "params": {"name": "list_clients", "arguments": {}}},
        {"jsonrpc": "2.0", "id": 4, "method": "tools/call", "params": {"name": "nope"}},
    )

    completed = subprocess.run(
        [sys.executable, "-m", "backend.estimator.mcp"],
        input=stdin,
        capture_output=True,
        text=True,
        cwd=str(ROOT_DIR),
        env=env,
        timeout=60,
    )

    assert completed.returncode == 0, completed.stderr
    responses = [json.loads(line) for line in completed.stdout.splitlines()]
    assert [response["id"] for response in responses] == [1, 2, 3, 4]
    assert responses[0]["result"]["serverInfo"]["name"] == "construction-estimator"
    assert len(responses[1]["result"]["tools"]) == 11
    clients = json.loads(responses[2]["result"]["content"][0]["text"])
    assert len(clients) == 4
    assert responses[3]["error"]["code"] == -32602
    assert "MCP server ready" in completed.stderr
    assert "Sample data seeded" in completed.stderr


def test_stdio_server_exits_with_status_one_on_bad_config(tmp_path):
    env = dict(os.environ)
    env["ESTIMATOR_CONFIG_DIR"] = str(tmp_path / "missing")
    env["PYTHONPATH"] = str(ROOT_DIR) + os.pathsep + env.get("PYTHONPATH", "")

    completed = subprocess.run(
        [sys.executable, "-m", "backend.estimator.mcp"],
        input="",
        capture_output=True,
        text=True,
        cwd=str(ROOT_DIR),
        env=env,
        timeout=60,
    )

    assert completed.returncode == 1
    assert completed.stdout == ""
    assert "Fatal error" in completed.stderr
