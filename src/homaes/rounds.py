"""
AES-128 round engine over encrypted state.

The state is a flat list of 16 encrypted bytes in AES column-major order
(byte 4*c + r is row r of column c). Every stage returns a new list.

Rounds are driven by declarative schedules: each entry names the round
number (which is also the round-key index) and the stages applied in it.
"""

from __future__ import annotations

import time
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Sequence, TypeVar

from .context import EvalContext
from .interfaces import EncryptedByte
from .key_schedule import BLOCK_SIZE, EXPANDED_KEY_SIZE, ROUNDS
from .mixcolumns import inv_mix_column, mix_column
from .sbox import inv_sbox_byte, sbox_byte
from .trace import TraceRecorder

T = TypeVar("T")
R = TypeVar("R")

ADD_ROUND_KEY = "add_round_key"
SUB_BYTES = "sub_bytes"
SHIFT_ROWS = "shift_rows"
MIX_COLUMNS = "mix_columns"
INV_SUB_BYTES = "inv_sub_bytes"
INV_SHIFT_ROWS = "inv_shift_rows"
INV_MIX_COLUMNS = "inv_mix_columns"

# new[i] = old[PERM[i]]
SHIFT_ROWS_PERM = (0, 5, 10, 15, 4, 9, 14, 3, 8, 13, 2, 7, 12, 1, 6, 11)
INV_SHIFT_ROWS_PERM = (0, 13, 10, 7, 4, 1, 14, 11, 8, 5, 2, 15, 12, 9, 6, 3)

Schedule = tuple[tuple[int, tuple[str, ...]], ...]

ENCRYPT_SCHEDULE: Schedule = (
    ((0, (ADD_ROUND_KEY,)),)
    + tuple(
        (r, (SUB_BYTES, SHIFT_ROWS, MIX_COLUMNS, ADD_ROUND_KEY))
        for r in range(1, ROUNDS)
    )
    + ((ROUNDS, (SUB_BYTES, SHIFT_ROWS, ADD_ROUND_KEY)),)
)

DECRYPT_SCHEDULE: Schedule = (
    ((ROUNDS, (ADD_ROUND_KEY,)),)
    + tuple(
        (r, (INV_SHIFT_ROWS, INV_SUB_BYTES, ADD_ROUND_KEY, INV_MIX_COLUMNS))
        for r in range(ROUNDS - 1, 0, -1)
    )
    + ((0, (INV_SHIFT_ROWS, INV_SUB_BYTES, ADD_ROUND_KEY)),)
)


def _check_state(state: Sequence[EncryptedByte]) -> None:
    if len(state) != BLOCK_SIZE:
        raise ValueError(f"State must be {BLOCK_SIZE} bytes, got {len(state)}")


def _columns(state: Sequence[EncryptedByte]) -> list[list[EncryptedByte]]:
    return [list(state[4 * c:4 * c + 4]) for c in range(4)]


def _permute(state: Sequence[EncryptedByte], perm: Sequence[int]) -> list[EncryptedByte]:
    _check_state(state)
    return [state[p] for p in perm]


class RoundEngine:
    """
    Runs AES-128 encryption and decryption on encrypted state.

    Independent bytes (SubBytes, AddRoundKey) and columns (MixColumns) of
    one stage are processed by up to `state_workers` threads. Output order
    never depends on the number of workers.

    Args:
        ctx: Session evaluation context
        state_workers: Threads per stage (1 = sequential)
        tracer: Optional recorder receiving one entry per stage
    """

    def __init__(
        self,
        ctx: EvalContext,
        state_workers: int = 16,
        tracer: TraceRecorder | None = None,
    ):
        if state_workers < 1:
            raise ValueError(f"state_workers must be >= 1, got {state_workers}")
        self.ctx = ctx
        self.engine = ctx.engine
        self.state_workers = state_workers
        self.tracer = tracer
        self.stage_seconds: dict[str, float] = {}

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def add_round_key(
        self, state: Sequence[EncryptedByte], key: Sequence[EncryptedByte]
    ) -> list[EncryptedByte]:
        _check_state(state)
        if len(key) != BLOCK_SIZE:
            raise ValueError(f"Round key must be {BLOCK_SIZE} bytes, got {len(key)}")
        return self._map(lambda pair: self.engine.byte_xor(*pair), list(zip(state, key)))

    def sub_bytes(self, state: Sequence[EncryptedByte]) -> list[EncryptedByte]:
        _check_state(state)
        return self._map(lambda ct: sbox_byte(self.ctx, ct), state)

    def inv_sub_bytes(self, state: Sequence[EncryptedByte]) -> list[EncryptedByte]:
        _check_state(state)
        return self._map(lambda ct: inv_sbox_byte(self.ctx, ct), state)

    def shift_rows(self, state: Sequence[EncryptedByte]) -> list[EncryptedByte]:
        """Rotate row r left by r positions. No engine calls."""
        return _permute(state, SHIFT_ROWS_PERM)

    def inv_shift_rows(self, state: Sequence[EncryptedByte]) -> list[EncryptedByte]:
        """Rotate row r right by r positions. No engine calls."""
        return _permute(state, INV_SHIFT_ROWS_PERM)

    def mix_columns(self, state: Sequence[EncryptedByte]) -> list[EncryptedByte]:
        _check_state(state)
        mixed = self._map(lambda col: mix_column(self.ctx, col), _columns(state))
        return [ct for col in mixed for ct in col]

    def inv_mix_columns(self, state: Sequence[EncryptedByte]) -> list[EncryptedByte]:
        _check_state(state)
        mixed = self._map(lambda col: inv_mix_column(self.engine, col), _columns(state))
        return [ct for col in mixed for ct in col]

    # ------------------------------------------------------------------
    # Full cipher
    # ------------------------------------------------------------------

    def encrypt(
        self, state: Sequence[EncryptedByte], round_keys: Sequence[EncryptedByte]
    ) -> list[EncryptedByte]:
        """Encrypt one block under 176 bytes of encrypted round-key material."""
        return self._run(ENCRYPT_SCHEDULE, "encrypt", state, round_keys)

    def decrypt(
        self, state: Sequence[EncryptedByte], round_keys: Sequence[EncryptedByte]
    ) -> list[EncryptedByte]:
        """Decrypt one block under 176 bytes of encrypted round-key material."""
        return self._run(DECRYPT_SCHEDULE, "decrypt", state, round_keys)

    def _run(
        self,
        schedule: Schedule,
        direction: str,
        state: Sequence[EncryptedByte],
        round_keys: Sequence[EncryptedByte],
    ) -> list[EncryptedByte]:
        _check_state(state)
        if len(round_keys) != EXPANDED_KEY_SIZE:
            raise ValueError(
                f"Round keys must be {EXPANDED_KEY_SIZE} bytes, got {len(round_keys)}"
            )

        self.stage_seconds = {}
        current = list(state)
        for round_num, operations in schedule:
            for operation in operations:
                start = time.perf_counter()
                if operation == ADD_ROUND_KEY:
                    key = round_keys[BLOCK_SIZE * round_num:BLOCK_SIZE * (round_num + 1)]
                    current = self.add_round_key(current, key)
                else:
                    current = getattr(self, operation)(current)
                elapsed = time.perf_counter() - start

                self.stage_seconds[operation] = self.stage_seconds.get(operation, 0.0) + elapsed
                if self.tracer is not None:
                    self.tracer.record_stage(direction, round_num, operation, elapsed, current)
        return current

    def _map(self, fn: Callable[[T], R], items: Sequence[T]) -> list[R]:
        workers = min(self.state_workers, len(items))
        if workers <= 1:
            return [fn(item) for item in items]
        with ThreadPoolExecutor(max_workers=workers) as pool:
            return list(pool.map(fn, items))
