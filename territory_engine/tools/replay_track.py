#!/usr/bin/env python3
"""Replay a recorded GPS track through a claim or exploration session.

The track is a CSV with ``timestamp``, ``latitude`` and ``longitude``
columns plus optional ``speed_mps`` and ``accuracy_m``. Timestamps may be
epoch seconds or ISO-8601 strings. Timer ticks are derived from the sample
timestamps, so a replay behaves like the live session did.

Usage examples:

    # Claim replay against territories exported to JSON
    python -m territory_engine.tools.replay_track track.csv \
        --owner runner-1 --territories territories.json

    # Exploration replay (distance plus speed integrity only)
    python -m territory_engine.tools.replay_track track.csv --mode exploration

    # Load live territories and upload the claim when it validates
    python -m territory_engine.tools.replay_track track.csv \
        --owner runner-1 --fetch --upload
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence

import pandas as pd

from ..collision import TerritoryCache
from ..errors import TerritoryDataError, TerritoryEngineError
from ..formatting import format_area, format_distance, format_duration
from ..models import ClaimedTerritory, GeoPoint, PathSample, SessionStatus
from ..persistence import TerritoryClient, territory_from_row
from ..services import ClaimSession, ExplorationSession, SessionSummary

LOGGER = logging.getLogger("replay_track")

REQUIRED_COLUMNS = ("timestamp", "latitude", "longitude")


def _setup_logging(verbose: bool) -> None:
    if not logging.getLogger().hasHandlers():
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
        )


def _optional_float(value: object) -> Optional[float]:
    if value is None or pd.isna(value):
        return None
    return float(value)


def load_track(path: Path) -> List[PathSample]:
    """Read a track CSV into time-ordered samples.

    Raises:
        ValueError: If a required column is missing or timestamps are unparsable.
    """

    frame = pd.read_csv(path)
    missing = [col for col in REQUIRED_COLUMNS if col not in frame.columns]
    if missing:
        raise ValueError(f"Track {path} is missing columns: {', '.join(missing)}")

    stamps = pd.to_numeric(frame["timestamp"], errors="coerce")
    if stamps.isna().any():
        parsed = pd.to_datetime(frame["timestamp"], utc=True, errors="coerce")
        if parsed.isna().any():
            raise ValueError(f"Track {path} has unparsable timestamps")
        stamps = (parsed - pd.Timestamp(0, tz="UTC")).dt.total_seconds()
    frame = frame.assign(timestamp=stamps.astype(float)).sort_values(
        "timestamp", kind="stable"
    )

    samples: List[PathSample] = []
    for row in frame.itertuples(index=False):
        samples.append(
            PathSample(
                point=GeoPoint(float(row.latitude), float(row.longitude)),
                timestamp_s=float(row.timestamp),
                speed_mps=_optional_float(getattr(row, "speed_mps", None)),
                accuracy_m=_optional_float(getattr(row, "accuracy_m", None)),
            )
        )
    return samples


def load_territories(path: Path) -> List[ClaimedTerritory]:
    """Parse a JSON array of stored territory rows, skipping malformed ones."""

    rows = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(rows, list):
        raise ValueError(f"Territory file {path} must contain a JSON array")
    territories: List[ClaimedTerritory] = []
    for row in rows:
        try:
            territories.append(territory_from_row(row))
        except TerritoryDataError as exc:
            LOGGER.warning("Skipping territory row: %s", exc)
    return territories


def _print_summary(summary: SessionSummary) -> None:
    print(f"status: {summary.status.value}")
    print(f"points: {summary.point_count}")
    print(f"distance: {format_distance(summary.distance_m)}")
    print(f"duration: {format_duration(summary.duration_s)}")
    if summary.failure_reason:
        print(f"reason: {summary.failure_reason}")


def replay_exploration(samples: Sequence[PathSample]) -> SessionSummary:
    first = samples[0]
    session = ExplorationSession(clock=lambda: first.timestamp_s)
    session.start(first.point, now=first.timestamp_s)
    for sample in samples[1:]:
        session.offer(sample)
        session.tick(sample.timestamp_s)
        if not session.is_active:
            break
    if session.is_active:
        return session.stop(samples[-1].timestamp_s)
    summary = session.last_summary
    assert summary is not None
    return summary


def replay_claim(
    samples: Sequence[PathSample],
    owner_id: str,
    territories: TerritoryCache,
    client: Optional[TerritoryClient] = None,
) -> SessionSummary:
    """Run a claim session over ``samples``; upload when ``client`` is given."""

    first = samples[0]
    session = ClaimSession(owner_id, territories, clock=lambda: first.timestamp_s)
    start = session.start(first.point, now=first.timestamp_s)
    if start.is_violation:
        print(f"start blocked: {start.message}")
        return SessionSummary(
            status=SessionStatus.FAILED,
            started_at=None,
            ended_at=first.timestamp_s,
            point_count=0,
            distance_m=0.0,
            failure_reason=start.message,
        )
    if start.message:
        print(f"start warning: {start.message}")

    for sample in samples:
        session.offer(sample)
        if not session.is_active:
            break
        territories.refresh_if_stale()
        session.tick(sample.timestamp_s)
        if not session.is_active:
            break

    verdict = session.verdict
    if session.can_upload and verdict is not None:
        print(f"territory: valid, {format_area(verdict.area_m2)}")
        if client is not None:
            client.upload_territory(session.build_upload_record())
    elif verdict is not None:
        print(f"territory: rejected ({verdict.message})")
    elif session.is_active:
        print("territory: loop never closed")

    if session.is_active:
        return session.stop(samples[-1].timestamp_s)
    summary = session.last_summary
    assert summary is not None
    return summary


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Replay a recorded GPS track through the session pipeline",
    )
    parser.add_argument("track", type=Path, help="CSV file with the recorded samples")
    parser.add_argument(
        "--mode",
        choices=("claim", "exploration"),
        default="claim",
        help="Session type to replay (default: claim)",
    )
    parser.add_argument("--owner", default="local", help="Owner id of the claimer")
    parser.add_argument(
        "--territories",
        type=Path,
        help="JSON array of stored territory rows to check collisions against",
    )
    parser.add_argument(
        "--fetch",
        action="store_true",
        help="Load active territories from the configured territory store",
    )
    parser.add_argument(
        "--upload",
        action="store_true",
        help="Upload the territory to the store when the loop validates",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    _setup_logging(args.verbose)

    try:
        samples = load_track(args.track)
    except (OSError, ValueError) as exc:
        LOGGER.error("Could not read track: %s", exc)
        return 2
    if not samples:
        LOGGER.error("Track %s contains no samples", args.track)
        return 2

    if args.mode == "exploration":
        summary = replay_exploration(samples)
        _print_summary(summary)
        return 0 if summary.status is SessionStatus.COMPLETED else 1

    client = TerritoryClient() if (args.fetch or args.upload) else None
    loader = client.load_active_territories if (client and args.fetch) else None
    cache = TerritoryCache(loader=loader)
    try:
        if args.territories is not None:
            cache.replace(load_territories(args.territories))
        elif args.fetch:
            cache.refresh()
        summary = replay_claim(
            samples, args.owner, cache, client if args.upload else None
        )
    except (OSError, ValueError, TerritoryEngineError) as exc:
        LOGGER.error("Replay failed: %s", exc)
        return 2

    _print_summary(summary)
    valid = summary.verdict is not None and summary.verdict.is_valid
    return 0 if summary.status is SessionStatus.COMPLETED and valid else 1


if __name__ == "__main__":
    raise SystemExit(main())
