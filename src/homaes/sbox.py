"""
AES S-box and inverse S-box as Boolean gate programs.

Forward: Boyar-Peralta depth-16 circuit with 32 AND gates
(https://eprint.iacr.org/2009/191.pdf). XNOR is written as XOR + NOT.
Inverse: Boyar-Peralta depth-16 inverse circuit sharing the same
nonlinear middle (https://eprint.iacr.org/2011/332.pdf).

Both programs use MSB-first wires: x0 (u0) is bit 7 of the input,
s0 is bit 7 of the output.
"""

from __future__ import annotations

from .circuit import GateProgram
from .codec import decompose, recompose
from .context import EvalContext
from .interfaces import EncryptedByte

SBOX_INSTRUCTIONS = (
    "y14 = x3 ^ x5",
    "y13 = x0 ^ x6",
    "y9 = x0 ^ x3",
    "y8 = x0 ^ x5",
    "t0 = x1 ^ x2",
    "y1 = t0 ^ x7",
    "y4 = y1 ^ x3",
    "y12 = y13 ^ y14",
    "y2 = y1 ^ x0",
    "y5 = y1 ^ x6",
    "y3 = y5 ^ y8",
    "t1 = x4 ^ y12",
    "y15 = t1 ^ x5",
    "y20 = t1 ^ x1",
    "y6 = y15 ^ x7",
    "y10 = y15 ^ t0",
    "y11 = y20 ^ y9",
    "y7 = x7 ^ y11",
    "y17 = y10 ^ y11",
    "y19 = y10 ^ y8",
    "y16 = t0 ^ y11",
    "y21 = y13 ^ y16",
    "y18 = x0 ^ y16",
    "t2 = y12 & y15",
    "t3 = y3 & y6",
    "t4 = t3 ^ t2",
    "t5 = y4 & x7",
    "t6 = t5 ^ t2",
    "t7 = y13 & y16",
    "t8 = y5 & y1",
    "t9 = t8 ^ t7",
    "t10 = y2 & y7",
    "t11 = t10 ^ t7",
    "t12 = y9 & y11",
    "t13 = y14 & y17",
    "t14 = t13 ^ t12",
    "t15 = y8 & y10",
    "t16 = t15 ^ t12",
    "t17 = t4 ^ t14",
    "t18 = t6 ^ t16",
    "t19 = t9 ^ t14",
    "t20 = t11 ^ t16",
    "t21 = t17 ^ y20",
    "t22 = t18 ^ y19",
    "t23 = t19 ^ y21",
    "t24 = t20 ^ y18",
    "t25 = t21 ^ t22",
    "t26 = t21 & t23",
    "t27 = t24 ^ t26",
    "t28 = t25 & t27",
    "t29 = t28 ^ t22",
    "t30 = t23 ^ t24",
    "t31 = t22 ^ t26",
    "t32 = t31 & t30",
    "t33 = t32 ^ t24",
    "t34 = t23 ^ t33",
    "t35 = t27 ^ t33",
    "t36 = t24 & t35",
    "t37 = t36 ^ t34",
    "t38 = t27 ^ t36",
    "t39 = t29 & t38",
    "t40 = t25 ^ t39",
    "t41 = t40 ^ t37",
    "t42 = t29 ^ t33",
    "t43 = t29 ^ t40",
    "t44 = t33 ^ t37",
    "t45 = t42 ^ t41",
    "z0 = t44 & y15",
    "z1 = t37 & y6",
    "z2 = t33 & x7",
    "z3 = t43 & y16",
    "z4 = t40 & y1",
    "z5 = t29 & y7",
    "z6 = t42 & y11",
    "z7 = t45 & y17",
    "z8 = t41 & y10",
    "z9 = t44 & y12",
    "z10 = t37 & y3",
    "z11 = t33 & y4",
    "z12 = t43 & y13",
    "z13 = t40 & y5",
    "z14 = t29 & y2",
    "z15 = t42 & y9",
    "z16 = t45 & y14",
    "z17 = t41 & y8",
    "t46 = z15 ^ z16",
    "t47 = z10 ^ z11",
    "t48 = z5 ^ z13",
    "t49 = z9 ^ z10",
    "t50 = z2 ^ z12",
    "t51 = z2 ^ z5",
    "t52 = z7 ^ z8",
    "t53 = z0 ^ z3",
    "t54 = z6 ^ z7",
    "t55 = z16 ^ z17",
    "t56 = z12 ^ t48",
    "t57 = t50 ^ t53",
    "t58 = z4 ^ t46",
    "t59 = z3 ^ t54",
    "t60 = t46 ^ t57",
    "t61 = z14 ^ t57",
    "t62 = t52 ^ t58",
    "t63 = t49 ^ t58",
    "t64 = z4 ^ t59",
    "t65 = t61 ^ t62",
    "t66 = z1 ^ t63",
    "t67 = t64 ^ t65",
    "s77 = t48 ^ t60",
    "s7 = s77 !",
    "s66 = t56 ^ t62",
    "s6 = s66 !",
    "s5 = t47 ^ t65",
    "s4 = t51 ^ t66",
    "s3 = t53 ^ t66",
    "s22 = t55 ^ t67",
    "s2 = s22 !",
    "s11 = t64 ^ s3",
    "s1 = s11 !",
    "s0 = t59 ^ t63",
)

INV_SBOX_INSTRUCTIONS = (
    "y0 = u0 ^ u3",
    "y22 = u1 ^ u3",
    "y2 = y22 !",
    "y4 = u0 ^ y2",
    "rtl0 = u6 ^ u7",
    "y1 = y2 ^ rtl0",
    "y77 = u2 ^ y1",
    "y7 = y77 !",
    "rtl1 = u3 ^ u4",
    "y66 = u7 ^ rtl1",
    "y6 = y66 !",
    "y3 = y1 ^ rtl1",
    "rtl22 = u0 ^ u2",
    "rtl2 = rtl22 !",
    "y5 = u5 ^ rtl2",
    "sa1 = y0 ^ y2",
    "sa0 = y1 ^ y3",
    "sb1 = y4 ^ y6",
    "sb0 = y5 ^ y7",
    "ah = y0 ^ y1",
    "al = y2 ^ y3",
    "aa = sa0 ^ sa1",
    "bh = y4 ^ y5",
    "bl = y6 ^ y7",
    "bb = sb0 ^ sb1",
    "ab20 = sa0 ^ sb0",
    "ab22 = al ^ bl",
    "ab23 = y3 ^ y7",
    "ab21 = sa1 ^ sb1",
    "abcd1 = ah & bh",
    "rr1 = y0 & y4",
    "ph11 = ab20 ^ abcd1",
    "t01 = y1 & y5",
    "ph01 = t01 ^ abcd1",
    "abcd2 = al & bl",
    "r1 = y2 & y6",
    "pl11 = ab22 ^ abcd2",
    "r2 = y3 & y7",
    "pl01 = r2 ^ abcd2",
    "r3 = sa0 & sb0",
    "vr1 = aa & bb",
    "pr1 = vr1 ^ r3",
    "wr1 = sa1 & sb1",
    "qr1 = wr1 ^ r3",
    "ab0 = ph11 ^ rr1",
    "ab1 = ph01 ^ ab21",
    "ab2 = pl11 ^ r1",
    "ab3 = pl01 ^ qr1",
    "cp1 = ab0 ^ pr1",
    "cp2 = ab1 ^ qr1",
    "cp3 = ab2 ^ pr1",
    "cp4 = ab3 ^ ab23",
    "tinv1 = cp3 ^ cp4",
    "tinv2 = cp3 & cp1",
    "tinv3 = cp2 ^ tinv2",
    "tinv4 = cp1 ^ cp2",
    "tinv5 = cp4 ^ tinv2",
    "tinv6 = tinv5 & tinv4",
    "tinv7 = tinv3 & tinv1",
    "d2 = cp4 ^ tinv7",
    "d0 = cp2 ^ tinv6",
    "tinv8 = cp1 & cp4",
    "tinv9 = tinv4 & tinv8",
    "tinv10 = tinv4 ^ tinv2",
    "d1 = tinv9 ^ tinv10",
    "tinv11 = cp2 & cp3",
    "tinv12 = tinv1 & tinv11",
    "tinv13 = tinv1 ^ tinv2",
    "d3 = tinv12 ^ tinv13",
    "sd1 = d1 ^ d3",
    "sd0 = d0 ^ d2",
    "dl = d0 ^ d1",
    "dh = d2 ^ d3",
    "dd = sd0 ^ sd1",
    "abcd3 = dh & bh",
    "rr2 = d3 & y4",
    "t02 = d2 & y5",
    "abcd4 = dl & bl",
    "r4 = d1 & y6",
    "r5 = d0 & y7",
    "r6 = sd0 & sb0",
    "vr2 = dd & bb",
    "wr2 = sd1 & sb1",
    "abcd5 = dh & ah",
    "r7 = d3 & y0",
    "r8 = d2 & y1",
    "abcd6 = dl & al",
    "r9 = d1 & y2",
    "r10 = d0 & y3",
    "r11 = sd0 & sa0",
    "vr3 = dd & aa",
    "wr3 = sd1 & sa1",
    "ph12 = rr2 ^ abcd3",
    "ph02 = t02 ^ abcd3",
    "pl12 = r4 ^ abcd4",
    "pl02 = r5 ^ abcd4",
    "pr2 = vr2 ^ r6",
    "qr2 = wr2 ^ r6",
    "p0 = ph12 ^ pr2",
    "p1 = ph02 ^ qr2",
    "p2 = pl12 ^ pr2",
    "p3 = pl02 ^ qr2",
    "ph13 = r7 ^ abcd5",
    "ph03 = r8 ^ abcd5",
    "pl13 = r9 ^ abcd6",
    "pl03 = r10 ^ abcd6",
    "pr3 = vr3 ^ r11",
    "qr3 = wr3 ^ r11",
    "p4 = ph13 ^ pr3",
    "s7 = ph03 ^ qr3",
    "p6 = pl13 ^ pr3",
    "p7 = pl03 ^ qr3",
    "s3 = p1 ^ p6",
    "s6 = p2 ^ p6",
    "s0 = p3 ^ p6",
    "x11 = p0 ^ p2",
    "s5 = s0 ^ x11",
    "x13 = p4 ^ p7",
    "x14 = x11 ^ x13",
    "s1 = s3 ^ x14",
    "x16 = p1 ^ s7",
    "s2 = x14 ^ x16",
    "x18 = p0 ^ p4",
    "x19 = s5 ^ x16",
    "s4 = x18 ^ x19",
)

_OUTPUTS = tuple(f"s{i}" for i in range(8))

SBOX_PROGRAM = GateProgram(
    name="sbox",
    inputs=tuple(f"x{i}" for i in range(8)),
    outputs=_OUTPUTS,
    instructions=SBOX_INSTRUCTIONS,
)

INV_SBOX_PROGRAM = GateProgram(
    name="inv_sbox",
    inputs=tuple(f"u{i}" for i in range(8)),
    outputs=_OUTPUTS,
    instructions=INV_SBOX_INSTRUCTIONS,
)


def _substitute(ctx: EvalContext, program: GateProgram, ct: EncryptedByte) -> EncryptedByte:
    bits = decompose(ctx.engine, ctx.pos_vals, ct)
    # codec is LSB-first, the programs are MSB-first
    out = ctx.executor.run(program, bits[::-1])
    return recompose(ctx.engine, ctx.pos_vals, out[::-1])


def sbox_byte(ctx: EvalContext, ct: EncryptedByte) -> EncryptedByte:
    """AES SubBytes on one encrypted byte."""
    return _substitute(ctx, SBOX_PROGRAM, ct)


def inv_sbox_byte(ctx: EvalContext, ct: EncryptedByte) -> EncryptedByte:
    """AES InvSubBytes on one encrypted byte."""
    return _substitute(ctx, INV_SBOX_PROGRAM, ct)
