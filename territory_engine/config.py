"""Central configuration for the territory engine.

All values are constants imported by the rest of the package. Adjust as needed
for your environment. Every value can be overridden from the environment
(optionally via a local `.env`).
"""

from __future__ import annotations

import importlib
import os


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _env_int(key: str, default: int) -> int:
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


# Load .env variables when python-dotenv is available.
_load_dotenv = None
try:
    _dotenv_mod = importlib.import_module("dotenv")
    _load_dotenv = getattr(_dotenv_mod, "load_dotenv", None)
except Exception:
    _load_dotenv = None

if callable(_load_dotenv):
    # Load .env from the current directory or any parent folder.
    _load_dotenv()


# ---------------------------------------------------------------------------
# Geodesy
# ---------------------------------------------------------------------------
# Mean Earth radius (metres) used by distance and area calculations.
EARTH_RADIUS_M = _env_float("EARTH_RADIUS_M", 6_371_000.0)


# ---------------------------------------------------------------------------
# Movement sample filter
# ---------------------------------------------------------------------------
# Samples whose reported horizontal accuracy is coarser than this are dropped.
SAMPLE_ACCURACY_THRESHOLD_M = _env_float("SAMPLE_ACCURACY_THRESHOLD_M", 50.0)

# Samples closer than this to the last accepted point are treated as jitter.
SAMPLE_MIN_MOVEMENT_M = _env_float("SAMPLE_MIN_MOVEMENT_M", 3.0)

# Drop samples that report no accuracy at all (negative values mean unknown).
SAMPLE_REJECT_UNKNOWN_ACCURACY = _env_bool("SAMPLE_REJECT_UNKNOWN_ACCURACY", False)


# ---------------------------------------------------------------------------
# Speed integrity
# ---------------------------------------------------------------------------
# Territory claiming: soft band only warns, hard band ends the session. A grace
# of 0 seconds terminates on the first hard breach.
CLAIM_SOFT_SPEED_KMH = _env_float("CLAIM_SOFT_SPEED_KMH", 15.0)
CLAIM_HARD_SPEED_KMH = _env_float("CLAIM_HARD_SPEED_KMH", 30.0)
CLAIM_SPEED_GRACE_SECONDS = _env_int("CLAIM_SPEED_GRACE_SECONDS", 0)

# Exploration: single hard threshold with a countdown before termination.
EXPLORATION_HARD_SPEED_KMH = _env_float("EXPLORATION_HARD_SPEED_KMH", 30.0)
EXPLORATION_SPEED_GRACE_SECONDS = _env_int("EXPLORATION_SPEED_GRACE_SECONDS", 10)


# ---------------------------------------------------------------------------
# Path recording and territory validation
# ---------------------------------------------------------------------------
# A loop can only close once the path holds this many points.
CLOSURE_MIN_POINTS = _env_int("CLOSURE_MIN_POINTS", 10)
# Maximum distance (metres) between the first and last point to close a loop.
CLOSURE_DISTANCE_M = _env_float("CLOSURE_DISTANCE_M", 15.0)

TERRITORY_MIN_POINTS = _env_int("TERRITORY_MIN_POINTS", 10)
TERRITORY_MIN_DISTANCE_M = _env_float("TERRITORY_MIN_DISTANCE_M", 50.0)
TERRITORY_MIN_AREA_M2 = _env_float("TERRITORY_MIN_AREA_M2", 100.0)

# Head/tail segments exempted from mutual self-intersection comparison. This
# is an empirical tolerance for the approach-and-close shape of walked loops.
SELF_INTERSECTION_EXEMPT_SEGMENTS = _env_int("SELF_INTERSECTION_EXEMPT_SEGMENTS", 2)


# ---------------------------------------------------------------------------
# Territory collision
# ---------------------------------------------------------------------------
# Seconds between path collision checks while recording.
COLLISION_CHECK_INTERVAL_SECONDS = _env_float("COLLISION_CHECK_INTERVAL_SECONDS", 10.0)

# Proximity bands (metres to the nearest foreign territory vertex).
# > SAFE -> safe, >= CAUTION -> caution, >= WARNING -> warning, else danger.
COLLISION_SAFE_M = _env_float("COLLISION_SAFE_M", 100.0)
COLLISION_CAUTION_M = _env_float("COLLISION_CAUTION_M", 50.0)
COLLISION_WARNING_M = _env_float("COLLISION_WARNING_M", 25.0)


# ---------------------------------------------------------------------------
# Session scheduling
# ---------------------------------------------------------------------------
# Fast cadence timer driving the speed countdown and periodic checks.
SESSION_TICK_SECONDS = _env_float("SESSION_TICK_SECONDS", 1.0)

# Seconds a fetched territory snapshot is considered fresh.
TERRITORY_CACHE_TTL_SECONDS = _env_int("TERRITORY_CACHE_TTL_SECONDS", 60)


# ---------------------------------------------------------------------------
# Persistence collaborator
# ---------------------------------------------------------------------------
# Base URL of the REST endpoint exposing the territories table, e.g.
# https://<project>.example.co/rest/v1. Credentials are read from the
# environment. Do not hardcode secrets.
TERRITORY_API_URL = os.getenv("TERRITORY_API_URL", "")
TERRITORY_API_KEY = os.getenv("TERRITORY_API_KEY", "")
TERRITORY_TABLE = os.getenv("TERRITORY_TABLE", "territories")

# Spatial reference written in front of persisted WKT polygons.
TERRITORY_POLYGON_SRID = _env_int("TERRITORY_POLYGON_SRID", 4326)

# HTTP session pool sizes and request timeout in seconds.
HTTP_POOL_CONNECTIONS = 10
HTTP_POOL_MAXSIZE = 10
REQUEST_TIMEOUT = 15
