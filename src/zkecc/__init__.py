"""zkecc: A Python package for encoding elliptic curve arithmetic as arithmetic circuit constraints.

The `zkecc` package provides gadgets that constrain elliptic curve operations over a field that differs
from the native field of the circuit. Coordinates (and, for `GeneralEccChip`, scalars) are emulated with
limbs of native field elements. On top of the point primitives and the incomplete addition formulas, the
package offers windowed scalar multiplication and multi-scalar multiplication, kept within the domain of
the incomplete formulas by an auxiliary point.

Gadgets are written against a mock constraint system (`zkecc.circuit`) that records the witness and the
constraints and reports every unsatisfied constraint.

Usage example:
    Constrain the sum of two secp256k1 points and expose it as a public input:

    >>> from zkecc.circuit.region import ConstraintSystem, RegionCtx
    >>> from zkecc.curves import BN254_SCALAR_MODULUS, secp256k1
    >>> from zkecc.ecc.general_ecc import GeneralEccChip
    >>>
    >>> chip = GeneralEccChip(secp256k1, BN254_SCALAR_MODULUS)
    >>> P, Q = 2 * secp256k1.generator, 3 * secp256k1.generator
    >>>
    >>> cs = ConstraintSystem(BN254_SCALAR_MODULUS, instance=chip.to_point(P + Q).public())
    >>> ctx = RegionCtx(cs.assign_region("add"))
    >>> R = chip.add(ctx, chip.assign_point(ctx, P), chip.assign_point(ctx, Q))
    >>> chip.expose_public(cs, R, 0)
    >>> cs.verify()
    []
"""
