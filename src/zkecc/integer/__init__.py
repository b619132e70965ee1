"""integer package.

This package provides arithmetic over a foreign field F_p inside a circuit over the native field F_n. Field
elements are represented as limbs of `bit_len_limb` bits and every operation tracks an upper bound on the
represented integer.

Modules:
    - rns: Contains the `Rns` parameters, the plaintext `Integer` and the `Range` modes.
    - integer_chip: Contains the `IntegerChip` class and `AssignedInteger`.

Usage example:
    >>> from zkecc.circuit.region import ConstraintSystem, RegionCtx
    >>> from zkecc.integer.integer_chip import IntegerChip
    >>> from zkecc.integer.rns import Integer, Rns
    >>>
    >>> secp256k1_MODULUS = 115792089237316195423570985008687907853269984665640564039457584007908834671663
    >>> BN254_SCALAR_MODULUS = 21888242871839275222246405745257275088548364400416034343698204186575808495617
    >>>
    >>> rns = Rns(secp256k1_MODULUS, BN254_SCALAR_MODULUS, 68)
    >>> cs = ConstraintSystem(BN254_SCALAR_MODULUS)
    >>> ctx = RegionCtx(cs.assign_region("integer"))
    >>> chip = IntegerChip(rns)
    >>> a = chip.assign_integer(ctx, Integer.from_fe(2, rns))
    >>> b = chip.assign_integer(ctx, Integer.from_fe(3, rns))
    >>> chip.mul(ctx, a, b).value()
    6
"""
