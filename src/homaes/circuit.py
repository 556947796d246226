"""
Straight-line Boolean gate programs and their parallel evaluation.

A program is a list of three-address instructions over named wires:

    y14 = x3 ^ x5      (XOR)
    t2 = y12 & y15     (AND)
    s7 = s77 !         (NOT)

Programs are parsed once into an index-addressed arena: every wire gets
an integer slot (inputs first, then one slot per gate in program order),
and every gate knows how many earlier gates it waits on and which gates
wait on it. Evaluation then runs a dependency-count schedule: gates whose
predecessor count reaches zero go on a ready queue and are picked up by
a small pool of worker threads.
"""

from __future__ import annotations

import queue
import threading
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Mapping, Sequence

from .interfaces import MAX_CIRCUIT_WORKERS, EncryptedBit, EvaluationEngine, default_circuit_workers

XOR = "^"
AND = "&"
NOT = "!"

BINARY_OPS = (XOR, AND)
OPERATORS = (XOR, AND, NOT)


class CircuitError(ValueError):
    """A gate program is malformed."""


@dataclass(frozen=True)
class Gate:
    """One instruction, resolved to integer wire slots."""

    name: str
    op: str
    out: int
    args: tuple[int, ...]


def _parse_line(line: str) -> tuple[str, str, tuple[str, ...]]:
    tokens = line.split()
    if len(tokens) == 5 and tokens[1] == "=":
        name, _, lhs, op, rhs = tokens
        if op not in BINARY_OPS:
            raise CircuitError(f"Unknown operator {op!r} in {line!r}")
        return name, op, (lhs, rhs)
    if len(tokens) == 4 and tokens[1] == "=":
        name, _, operand, op = tokens
        if op != NOT:
            raise CircuitError(f"Unknown operator {op!r} in {line!r}")
        return name, op, (operand,)
    raise CircuitError(f"Malformed instruction {line!r}")


class GateProgram:
    """An immutable, validated gate program.

    Args:
        name: Label used in error messages
        inputs: Input wire names, in positional order
        outputs: Output wire names, in positional order
        instructions: Instruction lines in program order
    """

    def __init__(
        self,
        name: str,
        inputs: Sequence[str],
        outputs: Sequence[str],
        instructions: Sequence[str],
    ):
        self.name = name
        self.inputs = tuple(inputs)
        self.outputs = tuple(outputs)

        slots: dict[str, int] = {}
        for wire in self.inputs:
            if wire in slots:
                raise CircuitError(f"{name}: duplicate input wire {wire!r}")
            slots[wire] = len(slots)

        gates: list[Gate] = []
        for line in instructions:
            wire, op, operands = _parse_line(line)
            args = []
            for operand in operands:
                if operand not in slots:
                    raise CircuitError(
                        f"{name}: operand {operand!r} of {line!r} is not defined earlier"
                    )
                args.append(slots[operand])
            if wire in slots:
                raise CircuitError(f"{name}: wire {wire!r} assigned twice")
            slots[wire] = len(slots)
            gates.append(Gate(name=wire, op=op, out=slots[wire], args=tuple(args)))

        for wire in self.outputs:
            if wire not in slots:
                raise CircuitError(f"{name}: output wire {wire!r} is never assigned")

        self.gates: tuple[Gate, ...] = tuple(gates)
        self.slots: dict[str, int] = slots
        self.output_slots = tuple(slots[w] for w in self.outputs)
        self.num_slots = len(slots)

        # Gate index per slot; inputs map to None
        producer: list[int | None] = [None] * len(self.inputs) + list(range(len(gates)))

        dependents: list[list[int]] = [[] for _ in gates]
        indegree: list[int] = []
        for idx, gate in enumerate(gates):
            preds = {producer[a] for a in gate.args if producer[a] is not None}
            indegree.append(len(preds))
            for p in preds:
                dependents[p].append(idx)

        self.indegree = tuple(indegree)
        self.dependents = tuple(tuple(d) for d in dependents)

    def __len__(self) -> int:
        return len(self.gates)

    def gate_counts(self) -> dict[str, int]:
        """Number of gates per operator."""
        counts = {op: 0 for op in OPERATORS}
        for gate in self.gates:
            counts[gate.op] += 1
        return counts

    @property
    def and_depth(self) -> int:
        """Multiplicative depth: longest chain of AND gates."""
        depth = [0] * self.num_slots
        for gate in self.gates:
            d = max(depth[a] for a in gate.args)
            depth[gate.out] = d + 1 if gate.op == AND else d
        return max((depth[s] for s in self.output_slots), default=0)

    def __repr__(self) -> str:
        return (
            f"GateProgram(name={self.name!r}, inputs={len(self.inputs)}, "
            f"outputs={len(self.outputs)}, gates={len(self.gates)})"
        )


class _Evaluation:
    """Mutable state of one program evaluation. Discarded afterwards."""

    def __init__(self, program: GateProgram, values: list[EncryptedBit | None], workers: int):
        self.program = program
        self.values = values
        self.workers = workers
        self.pending = list(program.indegree)
        self.remaining = len(program.gates)
        self.ready: queue.SimpleQueue[int | None] = queue.SimpleQueue()
        self.lock = threading.Lock()

        for idx, count in enumerate(self.pending):
            if count == 0:
                self.ready.put(idx)
        if self.remaining == 0:
            self.stop()

    def stop(self) -> None:
        for _ in range(self.workers):
            self.ready.put(None)

    def complete(self, idx: int) -> None:
        newly_ready = []
        with self.lock:
            self.remaining -= 1
            for dep in self.program.dependents[idx]:
                self.pending[dep] -= 1
                if self.pending[dep] == 0:
                    newly_ready.append(dep)
            done = self.remaining == 0

        for dep in newly_ready:
            self.ready.put(dep)
        if done:
            self.stop()


class CircuitExecutor:
    """Evaluates gate programs over encrypted bits with a worker pool.

    Results do not depend on the number of workers or on the order in
    which workers claim gates.
    """

    def __init__(self, engine: EvaluationEngine, workers: int | None = None):
        if workers is None:
            workers = default_circuit_workers()
        if workers < 1:
            raise ValueError(f"workers must be >= 1, got {workers}")
        self.engine = engine
        self.workers = min(workers, MAX_CIRCUIT_WORKERS)
        self._apply = {
            XOR: engine.bit_xor,
            AND: engine.bit_and,
            NOT: engine.bit_not,
        }

    def execute(
        self, program: GateProgram, inputs: Mapping[str, EncryptedBit]
    ) -> dict[str, EncryptedBit]:
        """Evaluate `program` on named inputs; return named outputs."""
        missing = [w for w in program.inputs if w not in inputs]
        if missing:
            raise ValueError(f"{program.name}: missing input wires {missing}")

        values: list[EncryptedBit | None] = [None] * program.num_slots
        for wire in program.inputs:
            values[program.slots[wire]] = inputs[wire]

        workers = min(self.workers, max(1, len(program.gates)))
        run = _Evaluation(program, values, workers)

        if workers == 1:
            self._work(run)
        else:
            with ThreadPoolExecutor(max_workers=workers) as pool:
                futures = [pool.submit(self._work, run) for _ in range(workers)]
                for future in futures:
                    future.result()

        return {w: values[s] for w, s in zip(program.outputs, program.output_slots)}

    def run(
        self, program: GateProgram, bits: Sequence[EncryptedBit]
    ) -> list[EncryptedBit]:
        """Positional form of `execute`: bits in input order, outputs in output order."""
        if len(bits) != len(program.inputs):
            raise ValueError(
                f"{program.name}: expected {len(program.inputs)} input bits, got {len(bits)}"
            )
        named = self.execute(program, dict(zip(program.inputs, bits)))
        return [named[w] for w in program.outputs]

    def _work(self, run: _Evaluation) -> None:
        gates = run.program.gates
        values = run.values
        while True:
            idx = run.ready.get()
            if idx is None:
                return
            gate = gates[idx]
            try:
                values[gate.out] = self._apply[gate.op](*(values[a] for a in gate.args))
            except BaseException:
                run.stop()
                raise
            run.complete(idx)
