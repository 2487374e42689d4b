"""
Batch scenario mode: run the allocator once per *.json file in a folder.

A bad file (unreadable or undecodable, malformed JSON, invalid input,
failing strategy) is logged and counted; the remaining files still run.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional

from .audit import write_audit_record
from .chart import render_chart
from .engine import allocate
from .errors import AllocationError
from .logger import get_logger
from .models import AllocationResult


@dataclass
class BatchReport:
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    errors: Dict[str, str] = field(default_factory=dict)
    results: Dict[str, AllocationResult] = field(default_factory=dict)


def scenario_files(folder: Path) -> List[Path]:
    return sorted(p for p in folder.iterdir() if p.is_file() and p.suffix == ".json")


def run_batch(
    folder: Path,
    config: Mapping[str, Any],
    scorer: Optional[object] = None,
    audit_dir: Optional[Path] = None,
    echo: Callable[[str], None] = print,
) -> BatchReport:
    logger = get_logger()
    if not folder.is_dir():
        raise NotADirectoryError(f"Batch folder not found: {folder}")

    report = BatchReport()
    for path in scenario_files(folder):
        report.processed += 1
        logger.record_run_attempt("batch")
        try:
            with path.open("r", encoding="utf-8") as f:
                data = json.load(f)
            result = allocate(data, config, scorer)
        except (OSError, ValueError, AllocationError) as e:
            report.failed += 1
            report.errors[path.name] = str(e)
            logger.record_run_failure("batch", type(e).__name__)
            logger.warning(f"Error running {path.name}", error=str(e))
            echo(f"Error running {path.name}: {e}")
            continue

        report.succeeded += 1
        report.results[path.name] = result
        logger.record_run_success("batch")
        echo(f"\n=== {path.name} ===")
        echo(render_chart(result.allocations))
        echo(f"Summary: {json.dumps(result.summary.to_dict())}")
        if audit_dir is not None:
            write_audit_record(data, config, result, audit_dir)

    logger.info(
        f"Batch complete: {report.succeeded}/{report.processed} succeeded",
        folder=str(folder),
        failed=report.failed,
    )
    return report
