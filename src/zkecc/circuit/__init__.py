"""circuit package.

This package provides the layout layer the gadgets are written against: a constraint system that records
witness cells and constraints, regions, and the region context that threads the row cursor.

Modules:
    - region: Contains `ConstraintSystem`, `Region`, `RegionCtx` and the assigned value types.

Usage example:
    >>> from zkecc.circuit.region import ConstraintSystem, RegionCtx
    >>>
    >>> cs = ConstraintSystem(native_modulus=101)
    >>> ctx = RegionCtx(cs.assign_region("region 0"))
    >>> a = ctx.assign_advice(0, 3)
    >>> ctx.constrain("a == 3", [a.cell], lambda values: values[0] == 3)
    >>> cs.verify()
    []
"""
