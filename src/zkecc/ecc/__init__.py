"""ecc package.

This package provides elliptic curve arithmetic over a foreign base field: point assignment and
on-curve checks, incomplete addition, doubling and ladder steps, and windowed single and multi-scalar
multiplication made safe by an auxiliary point.

Modules:
    - point: Contains the point types and `make_mul_aux`.
    - ecc_chip: Contains the `EccChip` base class.
    - base_field_ecc: Contains `BaseFieldEccChip`, for curves whose scalar field is the native field.
    - general_ecc: Contains `GeneralEccChip`, for curves whose scalar field is foreign.

Usage example:
    >>> import random
    >>> from zkecc.circuit.region import ConstraintSystem, RegionCtx
    >>> from zkecc.curves import BN254_SCALAR_MODULUS, secp256k1
    >>> from zkecc.ecc.general_ecc import GeneralEccChip
    >>>
    >>> chip = GeneralEccChip(secp256k1, BN254_SCALAR_MODULUS)
    >>> cs = ConstraintSystem(BN254_SCALAR_MODULUS)
    >>> ctx = RegionCtx(cs.assign_region("mul"))
    >>>
    >>> chip.assign_aux_generator(ctx, random.randrange(1, secp256k1.order) * secp256k1.generator)
    >>> chip.assign_aux(ctx, window_size=4, number_of_pairs=1)
    >>> point = chip.assign_point(ctx, secp256k1.generator)
    >>> scalar = chip.assign_scalar(ctx, 5)
    >>> result = chip.mul(ctx, point, scalar, window_size=4)
    >>> expected = 5 * secp256k1.generator
    >>> result.coordinates() == (expected.x, expected.y)
    True
    >>> cs.verify()
    []
"""
