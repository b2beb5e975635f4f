"""Order report exporter (statistics JSON filed next to the printer CSV)."""

import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..stats import upload_message

logger = logging.getLogger(__name__)


def build_order_report(stats: dict, order_ref: str = "", now: Optional[datetime] = None) -> dict:
    """
    Wrap order statistics into a report.

    The report leads with the order reference, the generation time and the
    upload message, followed by every count from order_stats().
    """
    report = {
        "order_ref": order_ref,
        "generated_at": (now or datetime.now()).isoformat(timespec="seconds"),
        "message": upload_message(stats),
    }
    report.update(stats)
    return report


def export_summary_json(
    stats: dict,
    output_path: Path,
    order_ref: str = "",
    now: Optional[datetime] = None,
) -> Path:
    """
    Export an order report as JSON.

    Args:
        stats: Dictionary of statistics from order_stats()
        output_path: Path to output JSON file
        order_ref: Order reference the statistics belong to
        now: Report time (current time by default)

    Returns:
        Path to the created JSON file
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    report = build_order_report(stats, order_ref, now)

    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False, default=str)

    logger.info(f"Order report saved to: {output_path}")
    return output_path
