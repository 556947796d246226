"""Reporting for homomorphic AES runs.

Formats results as CLI tables and exports them to JSON.
"""

from __future__ import annotations

import json
from pathlib import Path

from tabulate import tabulate

from .interfaces import Result


def format_results_table(
    results: list[Result],
    compact: bool = False,
) -> str:
    """Format results as a table string for CLI output.

    Args:
        results: List of Result objects
        compact: Use compact format

    Returns:
        Formatted table string
    """
    if not results:
        return "No results."

    if compact:
        headers = ["Dir", "Engine", "Output", "OK", "Ops"]
        rows = [
            [
                r.direction[:3],
                r.engine,
                r.output.hex(),
                "Y" if r.correct else "N",
                r.total_ops,
            ]
            for r in results
        ]
    else:
        headers = ["Direction", "Engine", "Output", "Correct", "Primitive Ops", "Random Bits", "Time (s)"]
        rows = [
            [
                r.direction,
                r.engine,
                r.output.hex(),
                "Yes" if r.correct else "No",
                r.total_ops,
                r.random_bits_total,
                f"{r.elapsed_seconds:.3f}",
            ]
            for r in results
        ]

    return tabulate(rows, headers=headers, tablefmt="simple")


def format_op_counts(result: Result) -> str:
    """Per-primitive call counts and per-stage timings of one result."""
    op_rows = [[op, count] for op, count in sorted(result.op_counts.items())]
    op_rows.append(["TOTAL", result.total_ops])
    lines = [tabulate(op_rows, headers=["Primitive", "Calls"], tablefmt="simple")]

    if result.stage_seconds:
        stage_rows = [
            [stage, f"{seconds:.4f}"]
            for stage, seconds in sorted(result.stage_seconds.items())
        ]
        lines.append("")
        lines.append(tabulate(stage_rows, headers=["Stage", "Seconds"], tablefmt="simple"))

    if result.notes:
        lines.append("")
        lines.append("Notes:")
        lines.extend(f"  - {note}" for note in result.notes)

    return "\n".join(lines)


def export_to_json(
    results: list[Result],
    output_path: str | Path,
    indent: int = 2,
) -> Path:
    """Export results to JSON file.

    Args:
        results: List of Result objects
        output_path: Path to output JSON file
        indent: JSON indentation level

    Returns:
        Path to written file
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    data = {
        "version": "1.0",
        "count": len(results),
        "results": [r.to_dict() for r in results],
    }

    with open(output_path, "w") as f:
        json.dump(data, f, indent=indent, default=str)

    return output_path
