from __future__ import annotations

import json
import logging
import threading
import uuid
from collections.abc import Iterable
from datetime import datetime

from .models import Event
from .settings import settings

logger = logging.getLogger(__name__)

_WRITE_LOCK = threading.Lock()


def append_event(event: Event) -> str:
    """Append an event to the JSONL event log and return its id."""
    event_id = str(uuid.uuid4())
    record = {
        "id": event_id,
        "source": event.source,
        "ts": event.ts.isoformat(),
        "payload_metadata": event.payload_metadata,
        "note": event.note,
    }
    line = json.dumps(record, ensure_ascii=True) + "\n"
    with _WRITE_LOCK:
        settings.data_dir.mkdir(parents=True, exist_ok=True)
        with settings.events_path.open("a", encoding="utf-8") as fh:
            fh.write(line)
    return event_id


def iter_events(limit: int | None = None) -> Iterable[tuple[str, Event]]:
    """Yield events from the log (newest first)."""
    path = settings.events_path
    if not path.exists():
        return

    lines = path.read_text(encoding="utf-8").splitlines()
    lines.reverse()
    if limit is not None:
        lines = lines[:limit]

    for raw in lines:
        if not raw.strip():
            continue
        try:
            record = json.loads(raw)
            ts = datetime.fromisoformat(str(record["ts"]).replace("Z", "+00:00"))
            event = Event(
                source=record["source"],
                ts=ts,
                payload_metadata=record.get("payload_metadata"),
                note=record.get("note"),
            )
        except (json.JSONDecodeError, KeyError, ValueError) as exc:
            logger.warning("Skipping malformed event line: %s", exc)
            continue
        yield str(record.get("id", "")), event
