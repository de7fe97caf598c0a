from datetime import datetime, tzinfo
from typing import Iterable, List, Optional

from volleyscout.config import ACTION_LABELS, CSV_HEADER
from volleyscout.models import LogEntry, TeamConfig, TeamSide

BOM = "\ufeff"


def _format_time(timestamp_ms: int, tz: Optional[tzinfo]) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000.0, tz).strftime("%H:%M:%S")


def _row(entry: LogEntry, config: TeamConfig, tz: Optional[tzinfo]) -> List[str]:
    serving = config.my_name if entry.serving_team is TeamSide.ME else config.op_name
    action = ACTION_LABELS.get(entry.action.value, entry.action.value) if entry.action else ""

    return [
        str(entry.set_number),
        _format_time(entry.timestamp, tz),
        str(entry.my_score),
        str(entry.op_score),
        serving,
        entry.player_number,
        "" if entry.position is None else str(entry.position),
        action,
        entry.result.value,
        entry.note or "",
    ]


def export_csv(
    entries: Iterable[LogEntry],
    config: TeamConfig,
    tz: Optional[tzinfo] = None,
) -> bytes:
    """
    Ledger -> UTF-8 CSV with BOM, one row per entry.

    Fields are joined with bare commas; values containing commas are not
    quoted and will shift the columns of that row.
    """
    lines = [",".join(CSV_HEADER)]
    lines.extend(",".join(_row(e, config, tz)) for e in entries)
    return (BOM + "\n".join(lines)).encode("utf-8")


def export_filename(config: TeamConfig) -> str:
    return f"{config.file_stem()}_export.csv"
