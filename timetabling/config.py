import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .solver import ALGORITHMS, BACKTRACKING_HEURISTICS

logger = logging.getLogger(__name__)

PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_EXAMPLE_PATH = PACKAGE_DIR / "example.json"
BENCHMARK_DIR = PACKAGE_DIR / "benchmarks"

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    default_algorithm: str
    log_level: str
    cors_origins: List[str]
    example_path: Path


def _parse_origins(raw: str) -> List[str]:
    origins = [o.strip() for o in raw.split(",") if o.strip()]
    return origins or ["*"]


def get_settings() -> Settings:
    """Read settings from TIMETABLING_* environment variables."""
    algorithm = os.getenv("TIMETABLING_DEFAULT_ALGORITHM", BACKTRACKING_HEURISTICS).strip().upper()
    if algorithm not in ALGORITHMS:
        logger.warning(
            "Ignoring TIMETABLING_DEFAULT_ALGORITHM=%r, using %s", algorithm, BACKTRACKING_HEURISTICS
        )
        algorithm = BACKTRACKING_HEURISTICS

    return Settings(
        default_algorithm=algorithm,
        log_level=os.getenv("TIMETABLING_LOG_LEVEL", "INFO").strip().upper() or "INFO",
        cors_origins=_parse_origins(os.getenv("TIMETABLING_CORS_ORIGINS", "*")),
        example_path=Path(os.getenv("TIMETABLING_EXAMPLE_PATH") or DEFAULT_EXAMPLE_PATH),
    )


def configure_logging(level: Optional[str] = None) -> None:
    """Attach one stream handler to the package logger; safe to call twice."""
    package_logger = logging.getLogger("timetabling")
    package_logger.setLevel((level or get_settings().log_level).upper())
    if not any(getattr(h, "_timetabling", False) for h in package_logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._timetabling = True  # marks our handler for the duplicate check
        package_logger.addHandler(handler)
