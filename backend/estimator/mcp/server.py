"""Stdio transport for the MCP tool server.

stdout carries exactly one JSON-RPC document per line, so every log record
goes to stderr; :func:`configure_logging` must run before anything else logs.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from ..core.database import configure_engine, get_session_factory, init_db
from ..seed import seed_sample_data
from ..services.config_loader import get_config_service
from ..services.store import EstimationStore
from .dispatcher import RpcDispatcher
from .tools import ToolExecutors

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(stream=sys.stderr, level=level.upper(), format=LOG_FORMAT, force=True)


class McpStdioServer:
    def __init__(self, dispatcher: RpcDispatcher, input_stream: TextIO, output_stream: TextIO) -> None:
        self.dispatcher = dispatcher
        self.input_stream = input_stream
        self.output_stream = output_stream

    def serve_forever(self) -> None:
        """Answer requests one line at a time until the input stream closes."""
        logger.info("MCP server ready, listening for requests on stdin")
        while True:
            line = self.input_stream.readline()
            if not line:
                break
            response = self.dispatcher.handle_line(line)
            if response is not None:
                self.output_stream.write(response + "\n")
                self.output_stream.flush()
        logger.info("Input closed; MCP server shutting down")


def build_server(input_stream: TextIO, output_stream: TextIO) -> McpStdioServer:
    config = get_config_service().get()
    # SQL echo installs a stdout handler, which would corrupt the protocol stream.
    configure_engine(config.database.url, echo=False)
    init_db()
    store = EstimationStore(get_session_factory())
    if config.database.seed_on_startup:
        seed_sample_data(store)
    logger.info("Database initialized at %s", config.database.resolved_path)

    dispatcher = RpcDispatcher(ToolExecutors(store, config.api), config.mcp)
    return McpStdioServer(dispatcher, input_stream, output_stream)


def main() -> None:
    configure_logging()
    try:
        config = get_config_service().get()
        configure_logging(config.mcp.log_level)
        logger.info("Starting Construction Estimation MCP server")
        server = build_server(sys.stdin, sys.stdout)
    except Exception:
        logger.exception("Fatal error while starting the MCP server")
        sys.exit(1)
    server.serve_forever()


if __name__ == "__main__":
    main()
