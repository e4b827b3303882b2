"""
Output formatters for reconciled snapshots.

Used by the ``export`` and ``show`` commands to write a session as JSON,
JSON Lines, Markdown or Parquet.
"""

from __future__ import annotations

import json
from typing import Any

import pyarrow as pa
import pyarrow.parquet as pq

from session_viewer.snapshot import Side, Snapshot


def snapshot_to_dict(snapshot: Snapshot, index: int) -> dict[str, Any]:
    """Convert a snapshot into a flat, JSON-serializable record."""
    return {
        "index": index,
        "timestamp": snapshot.timestamp.isoformat(),
        "originManifest": snapshot.origin_display,
        "generatedManifest": snapshot.generated_display,
        "highlighted": snapshot.is_highlighted,
    }


def format_json(record: Any, pretty: bool = True) -> str:
    """Format a record (or list of records) as JSON."""
    if pretty:
        return json.dumps(record, indent=2, ensure_ascii=False)
    return json.dumps(record, ensure_ascii=False)


def format_jsonl(record: dict[str, Any]) -> str:
    """Format record as single JSONL line."""
    return json.dumps(record, ensure_ascii=False)


def format_markdown(snapshot: Snapshot, index: int) -> str:
    """Format a snapshot as Markdown, keeping the bold markup as HTML."""
    lines: list[str] = []
    lines.append(f"# Snapshot {index}")
    lines.append("")
    lines.append(f"- **Generated Time:** {snapshot.timestamp.isoformat()}")
    lines.append(f"- **Highlighted:** {'yes' if snapshot.is_highlighted else 'no'}")
    lines.append("")

    for side in Side:
        lines.append(f"## {side.label}")
        lines.append("<pre>")
        lines.append(snapshot.display(side) or "(empty)")
        lines.append("</pre>")
        lines.append("")

    return "\n".join(lines)


def write_parquet(records: list[dict[str, Any]], output_file: str) -> None:
    """Write snapshot records to Parquet format.

    Args:
        records: Records produced by snapshot_to_dict().
        output_file: Path to output file.
    """
    if not records:
        table = pa.table({"_empty": []})
        pq.write_table(table, output_file)
        return

    table = pa.Table.from_pylist(records)
    pq.write_table(table, output_file)
