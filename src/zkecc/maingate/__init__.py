"""maingate package.

This package provides gadgets over the native field of the circuit: witness and constant assignment,
boolean conditions, conditional selection, equality and non-zero assertions and bit decomposition.

Modules:
    - main_gate: Contains the MainGate class.

Usage example:
    >>> from zkecc.circuit.region import ConstraintSystem, RegionCtx
    >>> from zkecc.maingate.main_gate import MainGate
    >>>
    >>> cs = ConstraintSystem(native_modulus=101)
    >>> ctx = RegionCtx(cs.assign_region("region 0"))
    >>> main_gate = MainGate(native_modulus=101)
    >>> bits = main_gate.to_bits(ctx, main_gate.assign_value(ctx, 6), 4)
    >>> [bit.value for bit in bits]
    [0, 1, 1, 0]
"""
