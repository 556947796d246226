"""
Trace recording and pretty printing for homomorphic AES runs.

Contains:
- TraceRecorder: one record per round stage, JSON Lines file output and
  compact verbose stdout
- print_header / print_result: shared formatting helpers
"""

import json
from typing import Any, Callable, Sequence, TextIO

from .utils import format_state_grid

# Decrypts the current encrypted state for display. Only the trusted
# session owner can supply one.
Inspector = Callable[[Sequence[Any]], bytes]


class TraceRecorder:
    """
    Records and outputs traces of round-engine execution.

    Supports:
    - JSON Lines file output (when trace_file is set)
    - Verbose stdout, one line per stage

    When `inspect` is given, each record also carries the decrypted state
    after the stage, which is what a FIPS-197 appendix listing shows.
    """

    def __init__(
        self,
        verbose: bool = False,
        trace_file: TextIO | None = None,
        inspect: Inspector | None = None,
    ):
        self.verbose = verbose
        self.trace_file = trace_file
        self.inspect = inspect
        self._records: list[dict[str, Any]] = []

    def record(self, **kwargs) -> None:
        """Record a trace entry."""
        self._records.append(kwargs)

        if self.trace_file:
            self._write_jsonl(kwargs)

        if self.verbose:
            self._print_verbose(kwargs)

    def record_stage(
        self,
        direction: str,
        round_num: int,
        operation: str,
        seconds: float,
        state: Sequence[Any],
    ) -> None:
        """Record one completed round stage."""
        entry: dict[str, Any] = {
            "direction": direction,
            "round": round_num,
            "operation": operation,
            "seconds": round(seconds, 6),
        }
        if self.inspect is not None:
            entry["state"] = self.inspect(state)
        self.record(**entry)

    def _write_jsonl(self, record: dict[str, Any]) -> None:
        serializable = self._make_serializable(record)
        self.trace_file.write(json.dumps(serializable) + "\n")
        self.trace_file.flush()

    def _make_serializable(self, obj: Any) -> Any:
        if isinstance(obj, dict):
            return {k: self._make_serializable(v) for k, v in obj.items()}
        elif isinstance(obj, list):
            return [self._make_serializable(item) for item in obj]
        elif isinstance(obj, bytes):
            return obj.hex()
        else:
            return obj

    def _print_verbose(self, record: dict[str, Any]) -> None:
        round_num = record.get("round", "?")
        operation = record.get("operation", "unknown")
        seconds = record.get("seconds", 0.0)

        line = f"R{round_num:<2} {operation:16s} {seconds * 1000:9.2f} ms"
        if "state" in record:
            line += f"  STATE:{record['state'].hex()}"
        print(line)

    def get_records(self) -> list[dict[str, Any]]:
        return list(self._records)

    def clear(self) -> None:
        self._records.clear()


# ------------------------------------------------------------------
# Shared formatting functions
# ------------------------------------------------------------------

def print_header(title: str) -> None:
    """Print a section header."""
    print(f"\n{'#'*70}")
    print(f"# {title}")
    print(f"{'#'*70}")


def print_result(output: bytes, elapsed_seconds: float, total_ops: int,
                 random_bits: int | None = None,
                 passed: bool = True) -> None:
    """Print the final block result."""
    print(f"\n{'='*70}")
    print("RESULT")
    print(f"{'='*70}")
    print(f"Output: {output.hex()}")
    print(format_state_grid(output))
    print(f"Elapsed: {elapsed_seconds:.3f} s")
    print(f"Engine primitive calls: {total_ops}")

    if random_bits is not None:
        print(f"Random bits consumed: {random_bits}")

    status = "PASS" if passed else "FAIL"
    marker = "[OK]" if passed else "[ERROR]"
    print(f"Verification: {marker} {status}")
    print(f"{'='*70}")
