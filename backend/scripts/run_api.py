from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import uvicorn

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from backend.estimator.services.config_loader import get_config_service


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the Construction Estimation REST API")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5125)
    parser.add_argument("--reload", action="store_true")
    args = parser.parse_args()

    level = get_config_service().get().mcp.log_level
    logging.basicConfig(level=level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    uvicorn.run(
        "backend.estimator.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        app_dir=str(ROOT),
    )


if __name__ == "__main__":
    main()
