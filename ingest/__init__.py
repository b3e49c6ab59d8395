from ingest.writer import event_rows, write_event_batch, load_events

__all__ = ["event_rows", "write_event_batch", "load_events"]
