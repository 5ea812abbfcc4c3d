"""
Telemetry sink for device log batches.
"""

import json
import logging
from typing import List, Optional, Sequence, Tuple

from pydantic import ValidationError

from trmnl_byos.models import LogEntry, LogRequest

logger = logging.getLogger("trmnl_byos.telemetry")


def parse_log_batch(body: bytes) -> Tuple[List[LogEntry], int]:
    """
    Parse a POST /api/log body without ever rejecting it.

    A well-formed `{"logs": [...]}` body is validated in one pass. Otherwise
    each entry is validated on its own and the ones that do not fit
    `LogEntry` are dropped.

    Returns:
        Tuple of (valid entries, number of dropped entries)
    """
    if not body.strip():
        return [], 0
    try:
        return LogRequest.model_validate_json(body).logs, 0
    except ValidationError:
        pass

    try:
        payload = json.loads(body)
    except ValueError:
        return [], 1

    raw_entries = payload.get("logs") if isinstance(payload, dict) else None
    if not isinstance(raw_entries, list):
        return [], 1

    entries: List[LogEntry] = []
    dropped = 0
    for raw in raw_entries:
        try:
            entries.append(LogEntry.model_validate(raw))
        except ValidationError:
            dropped += 1
    return entries, dropped


class TelemetrySink:
    """Writes device log entries to the application log."""

    def __init__(self, log: logging.Logger = logger):
        self.log = log

    def record(
        self,
        device_id: Optional[str],
        entries: Sequence[LogEntry],
        dropped: int = 0,
    ) -> None:
        if dropped:
            self.log.warning(
                "[TRMNL LOG] device=%s dropped %d malformed log entries",
                device_id or "unknown",
                dropped,
            )
        for entry in entries:
            self.log.info(
                "[TRMNL LOG] device=%s id=%s message=%r wake_reason=%s "
                "battery=%s wifi_signal=%s firmware=%s source=%s:%s",
                device_id or "unknown",
                entry.id,
                entry.message,
                entry.wake_reason,
                entry.battery_voltage,
                entry.wifi_signal,
                entry.firmware_version,
                entry.source_path,
                entry.source_line,
            )
