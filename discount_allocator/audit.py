"""
Audit trail for completed allocation runs.

Each successful run is written as logs/allocation-log-<timestamp>.json
containing {input, config, result}. Records are write-only; nothing in
the allocator reads them back. Old records can be pruned by age.
"""

import json
from datetime import datetime, timedelta
from pathlib import Path
from typing import IO, Any, Dict, Mapping, Optional, Tuple

from .config import config_to_json
from .logger import get_logger
from .models import AllocationResult

RECORD_PREFIX = "allocation-log-"
MAX_NAME_ATTEMPTS = 1000


def record_filename(now: Optional[datetime] = None, suffix: int = 0) -> str:
    stamp = (now or datetime.now()).isoformat(timespec="microseconds")
    stamp = stamp.replace(":", "-").replace(".", "-")
    if suffix:
        stamp = f"{stamp}-{suffix}"
    return f"{RECORD_PREFIX}{stamp}.json"


def _create_record_file(audit_dir: Path) -> Tuple[Path, IO[str]]:
    """Open a new record file, never reusing the name of an existing one."""
    now = datetime.now()
    for suffix in range(MAX_NAME_ATTEMPTS):
        path = audit_dir / record_filename(now, suffix)
        try:
            return path, path.open("x", encoding="utf-8")
        except FileExistsError:
            continue
    raise FileExistsError(f"No free audit record name in {audit_dir}")


def write_audit_record(
    data: Mapping[str, Any],
    config: Mapping[str, Any],
    result: AllocationResult,
    audit_dir: Path,
) -> Optional[Path]:
    """
    Persist one run. Returns the record path, or None if the write failed.
    A failed write is logged and never propagates to the caller.
    """
    logger = get_logger()
    record: Dict[str, Any] = {
        "input": data,
        "config": config_to_json(config),
        "result": result.to_dict(),
    }
    path = None
    try:
        audit_dir.mkdir(parents=True, exist_ok=True)
        path, f = _create_record_file(audit_dir)
        with f:
            json.dump(record, f, indent=2, ensure_ascii=False)
    except (OSError, TypeError, ValueError) as e:
        logger.error("Failed to write audit record", path=str(path or audit_dir), error=str(e))
        return None
    logger.info(f"Audit log saved: {path}")
    return path


def prune_audit_records(audit_dir: Path, days: int = 30, now: Optional[datetime] = None) -> Tuple[int, int]:
    """
    Remove audit records whose file modification time is older than `days`.

    Returns:
        Tuple of (records_before, records_after)
    """
    logger = get_logger()
    if not audit_dir.exists():
        return (0, 0)

    cutoff = (now or datetime.now()) - timedelta(days=days)
    records = sorted(audit_dir.glob(f"{RECORD_PREFIX}*.json"))
    removed = 0
    for path in records:
        modified = datetime.fromtimestamp(path.stat().st_mtime)
        if modified < cutoff:
            try:
                path.unlink()
                removed += 1
                logger.debug("Removed stale audit record", path=str(path), modified=modified.isoformat())
            except OSError as e:
                logger.warning("Could not remove audit record", path=str(path), error=str(e))

    before = len(records)
    after = before - removed
    logger.info(
        f"Audit cleanup complete: {removed} removed, {after} remaining",
        records_before=before,
        records_removed=removed,
        days_threshold=days,
    )
    return (before, after)
