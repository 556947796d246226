"""
MixColumns as a Boolean gate program, InvMixColumns by table lookup.

Forward MixColumns is a 92-XOR straight-line program for the MDS matrix
[2 3 1 1; 1 2 3 1; 1 1 2 3; 3 1 1 2] (https://eprint.iacr.org/2019/833.pdf).
Wires are LSB-first: x{8j+i} is bit i of input byte j, y{8j+i} is bit i
of output byte j.

The inverse direction does not use a circuit. Each state byte is mapped
through the public x9, x11, x13 and x14 tables with one engine lookup
apiece, and the products are combined with a fixed cross-column XOR
pattern. One lookup per coefficient is cheaper than a bit-level circuit
for the inverse matrix, which needs far more XORs.
"""

from __future__ import annotations

from typing import Sequence

from .circuit import GateProgram
from .codec import decompose, recompose
from .context import EvalContext
from .interfaces import EncryptedByte, EvaluationEngine
from .tables import GMUL9, GMUL11, GMUL13, GMUL14

MIX_COLUMNS_INSTRUCTIONS = (
    "t0 = x0 ^ x8",
    "t1 = x16 ^ x24",
    "t2 = x1 ^ x9",
    "t3 = x17 ^ x25",
    "t4 = x2 ^ x10",
    "t5 = x18 ^ x26",
    "t6 = x3 ^ x11",
    "t7 = x19 ^ x27",
    "t8 = x4 ^ x12",
    "t9 = x20 ^ x28",
    "t10 = x5 ^ x13",
    "t11 = x21 ^ x29",
    "t12 = x6 ^ x14",
    "t13 = x22 ^ x30",
    "t14 = x23 ^ x31",
    "t15 = x7 ^ x15",
    "t16 = x8 ^ t1",
    "y0 = t15 ^ t16",
    "t17 = x7 ^ x23",
    "t18 = x24 ^ t0",
    "y16 = t14 ^ t18",
    "t19 = t1 ^ y16",
    "y24 = t17 ^ t19",
    "t20 = x27 ^ t14",
    "t21 = t0 ^ y0",
    "y8 = t17 ^ t21",
    "t22 = t5 ^ t20",
    "y19 = t6 ^ t22",
    "t23 = x11 ^ t15",
    "t24 = t7 ^ t23",
    "y3 = t4 ^ t24",
    "t25 = x2 ^ x18",
    "t26 = t17 ^ t25",
    "t27 = t9 ^ t23",
    "t28 = t8 ^ t20",
    "t29 = x10 ^ t2",
    "y2 = t5 ^ t29",
    "t30 = x26 ^ t3",
    "y18 = t4 ^ t30",
    "t31 = x9 ^ x25",
    "t32 = t25 ^ t31",
    "y10 = t30 ^ t32",
    "y26 = t29 ^ t32",
    "t33 = x1 ^ t18",
    "t34 = x30 ^ t11",
    "y22 = t12 ^ t34",
    "t35 = x14 ^ t13",
    "y6 = t10 ^ t35",
    "t36 = x5 ^ x21",
    "t37 = x30 ^ t17",
    "t38 = x17 ^ t16",
    "t39 = x13 ^ t8",
    "y5 = t11 ^ t39",
    "t40 = x12 ^ t36",
    "t41 = x29 ^ t9",
    "y21 = t10 ^ t41",
    "t42 = x28 ^ t40",
    "y13 = t41 ^ t42",
    "y29 = t39 ^ t42",
    "t43 = x15 ^ t12",
    "y7 = t14 ^ t43",
    "t44 = x14 ^ t37",
    "y31 = t43 ^ t44",
    "t45 = x31 ^ t13",
    "y15 = t44 ^ t45",
    "y23 = t15 ^ t45",
    "t46 = t12 ^ t36",
    "y14 = y6 ^ t46",
    "t47 = t31 ^ t33",
    "y17 = t19 ^ t47",
    "t48 = t6 ^ y3",
    "y11 = t26 ^ t48",
    "t49 = t2 ^ t38",
    "y25 = y24 ^ t49",
    "t50 = t7 ^ y19",
    "y27 = t26 ^ t50",
    "t51 = x22 ^ t46",
    "y30 = t11 ^ t51",
    "t52 = x19 ^ t28",
    "y20 = x28 ^ t52",
    "t53 = x3 ^ t27",
    "y4 = x12 ^ t53",
    "t54 = t3 ^ t33",
    "y9 = y8 ^ t54",
    "t55 = t21 ^ t31",
    "y1 = t38 ^ t55",
    "t56 = x4 ^ t17",
    "t57 = x19 ^ t56",
    "y12 = t27 ^ t57",
    "t58 = x3 ^ t28",
    "t59 = t17 ^ t58",
    "y28 = x20 ^ t59",
)

MIX_COLUMNS_PROGRAM = GateProgram(
    name="mix_columns",
    inputs=tuple(f"x{i}" for i in range(32)),
    outputs=tuple(f"y{i}" for i in range(32)),
    instructions=MIX_COLUMNS_INSTRUCTIONS,
)

# Output byte p of a column is
#   (9*a[G9[p]] ^ 11*a[G11[p]]) ^ (13*a[G13[p]] ^ 14*a[G14[p]])
# matching the inverse MDS rows [14 11 13 9], [9 14 11 13], ...
G9_INDEX = (3, 0, 1, 2)
G11_INDEX = (1, 2, 3, 0)
G13_INDEX = (2, 3, 0, 1)
G14_INDEX = (0, 1, 2, 3)


def _check_column(column: Sequence[EncryptedByte]) -> None:
    if len(column) != 4:
        raise ValueError(f"Column must be 4 bytes, got {len(column)}")


def mix_column(ctx: EvalContext, column: Sequence[EncryptedByte]) -> list[EncryptedByte]:
    """AES MixColumns on one encrypted 4-byte column."""
    _check_column(column)

    bits = []
    for ct in column:
        bits.extend(decompose(ctx.engine, ctx.pos_vals, ct))

    out = ctx.executor.run(MIX_COLUMNS_PROGRAM, bits)
    return [recompose(ctx.engine, ctx.pos_vals, out[8 * j:8 * j + 8]) for j in range(4)]


def inv_mix_column(
    engine: EvaluationEngine, column: Sequence[EncryptedByte]
) -> list[EncryptedByte]:
    """AES InvMixColumns on one encrypted 4-byte column via GF(2^8) lookups."""
    _check_column(column)

    g9 = [engine.table_lookup(ct, GMUL9) for ct in column]
    g11 = [engine.table_lookup(ct, GMUL11) for ct in column]
    g13 = [engine.table_lookup(ct, GMUL13) for ct in column]
    g14 = [engine.table_lookup(ct, GMUL14) for ct in column]

    result = []
    for p in range(4):
        left = engine.byte_xor(g9[G9_INDEX[p]], g11[G11_INDEX[p]])
        right = engine.byte_xor(g13[G13_INDEX[p]], g14[G14_INDEX[p]])
        result.append(engine.byte_xor(left, right))
    return result
