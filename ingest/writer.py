import json
import logging
import uuid
from datetime import date
from pathlib import Path
from typing import List, Optional

import polars as pl

from config.settings import EVENTS_DIR
from ingest.schema import EVENT_SCHEMA, REQUIRED_EVENT_FIELDS

logger = logging.getLogger(__name__)


def _as_timestamp(value) -> Optional[float]:
    try:
        ts = float(value)
    except (TypeError, ValueError):
        return None
    return ts if ts == ts else None


def event_rows(session_id: str, events: list, user_id: Optional[str] = None) -> List[dict]:
    """Keep events carrying a type and a numeric timestamp, keyed to the session."""
    rows = []
    today = date.today()
    for event in events or []:
        if not isinstance(event, dict):
            continue
        if not all(event.get(field) for field in REQUIRED_EVENT_FIELDS):
            continue
        ts = _as_timestamp(event.get("ts"))
        if ts is None:
            continue
        track_id = event.get("track_id")
        rows.append({
            "user_id": str(user_id) if user_id else None,
            "session_id": str(session_id),
            "type": str(event["type"]),
            "track_id": str(track_id) if track_id else None,
            "ts": ts,
            "payload": json.dumps(event, default=str),
            "ingest_date": today,
        })
    return rows


def write_event_batch(rows: List[dict], output_dir: Path = EVENTS_DIR) -> Path:
    if not rows:
        raise ValueError("no rows to write")
    day_dir = Path(output_dir) / f"date={rows[0]['ingest_date'].isoformat()}"
    day_dir.mkdir(parents=True, exist_ok=True)

    df = pl.DataFrame(rows, schema=EVENT_SCHEMA)
    out_path = day_dir / f"batch_{uuid.uuid4().hex}.parquet"
    df.write_parquet(out_path)
    logger.info("Wrote %d events to %s", df.height, out_path)
    return out_path


def get_parquet_paths(events_dir: Path = EVENTS_DIR, day: date = None) -> list:
    events_dir = Path(events_dir)
    if day:
        day_dir = events_dir / f"date={day.isoformat()}"
        if day_dir.exists():
            return sorted(day_dir.glob("*.parquet"))
        return []
    return sorted(events_dir.glob("date=*/*.parquet"))


def load_events(events_dir: Path = EVENTS_DIR, day: date = None) -> pl.DataFrame:
    paths = get_parquet_paths(events_dir, day)
    if not paths:
        return pl.DataFrame(schema=EVENT_SCHEMA)
    return pl.concat([pl.read_parquet(p) for p in paths])
