"""Curves and native fields the chips are instantiated with.

Curves are ECPy short Weierstrass curves. secp256k1 and secp256r1 come from ECPy's curve table, BN254 G1
(y^2 = x^3 + 3 over its base field) is built from its domain parameters.
"""

from ecpy.curve_defs import WEIERSTRASS
from ecpy.curves import Curve, WeierstrassCurve

BN254_BASE_MODULUS = 21888242871839275222246405745257275088696311157297823662689037894645226208583
BN254_SCALAR_MODULUS = 21888242871839275222246405745257275088548364400416034343698204186575808495617

bn254 = WeierstrassCurve(
    {
        "name": "bn254",
        "type": WEIERSTRASS,
        "size": 254,
        "a": 0,
        "b": 3,
        "field": BN254_BASE_MODULUS,
        "generator": (1, 2),
        "order": BN254_SCALAR_MODULUS,
        "cofactor": 1,
    }
)

secp256k1 = Curve.get_curve("secp256k1")
secp256r1 = Curve.get_curve("secp256r1")
