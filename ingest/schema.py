import polars as pl

EVENT_SCHEMA = {
    "user_id": pl.Utf8,
    "session_id": pl.Utf8,
    "type": pl.Utf8,
    "track_id": pl.Utf8,
    "ts": pl.Float64,
    "payload": pl.Utf8,
    "ingest_date": pl.Date,
}

REQUIRED_EVENT_FIELDS = [
    "type",
    "ts",
]

# impression, play_start, play_progress, like, dislike, ... are all accepted;
# the type is stored as-is.
