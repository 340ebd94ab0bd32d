from __future__ import annotations

import logging
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from backend.estimator.core.database import get_session_factory, init_db
from backend.estimator.seed import seed_sample_data
from backend.estimator.services.store import EstimationStore


def main() -> None:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
    init_db()
    seed_sample_data(EstimationStore(get_session_factory()))


if __name__ == "__main__":
    main()
