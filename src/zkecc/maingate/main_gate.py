"""Gadgets over the native field of the circuit."""

from zkecc.circuit.region import AssignedCondition, AssignedValue, RegionCtx
from zkecc.util.ecc_params import EccConfig, default_config
from zkecc.util.utility_functions import boolean_list_to_int, int_to_boolean_list


class MainGate:
    """Native field gadgets laid out over `config.main_gate_width` advice columns.

    Every gadget fills a single row (more for bit decompositions wider than the gate) and records the
    polynomial identity its cells satisfy. All identities are taken modulo `native_modulus`.

    Attributes:
        native_modulus (int): The characteristic of the native field.
        config (EccConfig): The layout configuration.
    """

    def __init__(self, native_modulus: int, config: EccConfig = default_config):
        self.native_modulus = native_modulus
        self.config = config

    def _is_zero(self, value: int) -> bool:
        return value % self.native_modulus == 0

    def assign_value(self, ctx: RegionCtx, value: int | None) -> AssignedValue:
        """Assign an unconstrained witness."""
        out = ctx.assign_advice(0, value)
        ctx.next()
        return out

    def assign_bit(self, ctx: RegionCtx, value: int | None) -> AssignedCondition:
        """Assign a witness constrained by `b * b - b = 0`."""
        assigned = ctx.assign_advice(0, value)
        ctx.constrain("assign_bit", [assigned.cell], lambda v: self._is_zero(v[0] * v[0] - v[0]))
        ctx.next()
        return AssignedCondition(assigned.cell, assigned.value)

    def assign_constant(self, ctx: RegionCtx, constant: int) -> AssignedValue:
        """Assign `constant` as a fixed value."""
        assigned = ctx.assign_advice(0, constant)
        ctx.constrain("assign_constant", [assigned.cell], lambda v: self._is_zero(v[0] - constant))
        ctx.next()
        return assigned

    def assign_constant_bit(self, ctx: RegionCtx, constant: int) -> AssignedCondition:
        """Assign `constant` (0 or 1) as a fixed condition."""
        if constant not in (0, 1):
            msg = f"A condition must be 0 or 1: constant: {constant}"
            raise ValueError(msg)
        assigned = self.assign_constant(ctx, constant)
        return AssignedCondition(assigned.cell, assigned.value)

    def select(
        self, ctx: RegionCtx, a: AssignedValue, b: AssignedValue, cond: AssignedValue
    ) -> AssignedValue:
        """Return `a` if `cond` is 1, `b` otherwise.

        The row holds [cond, a, b, out] and satisfies `cond * a - cond * b + b - out = 0`.
        """
        value = None
        if cond.value is not None:
            value = a.value if cond.value == 1 else b.value
        out = ctx.assign_advice(3, value)
        ctx.constrain(
            "select",
            [cond.cell, a.cell, b.cell, out.cell],
            lambda v: self._is_zero(v[0] * v[1] - v[0] * v[2] + v[2] - v[3]),
        )
        ctx.next()
        return out

    def select_or_assign(self, ctx: RegionCtx, a: AssignedValue, b: int, cond: AssignedValue) -> AssignedValue:
        """Return `a` if `cond` is 1, the constant `b` otherwise."""
        value = None
        if cond.value is not None:
            value = a.value if cond.value == 1 else b % self.native_modulus
        out = ctx.assign_advice(2, value)
        ctx.constrain(
            "select_or_assign",
            [cond.cell, a.cell, out.cell],
            lambda v: self._is_zero(v[0] * v[1] - v[0] * b + b - v[2]),
        )
        ctx.next()
        return out

    def assert_equal(self, ctx: RegionCtx, a: AssignedValue, b: AssignedValue):
        """Constrain `a - b = 0`."""
        ctx.constrain("assert_equal", [a.cell, b.cell], lambda v: self._is_zero(v[0] - v[1]))
        ctx.next()

    def assert_not_zero(self, ctx: RegionCtx, a: AssignedValue):
        """Constrain `a` to be invertible: `a * a_inv - 1 = 0` for a witness `a_inv`."""
        inverse = None
        if a.value is not None:
            inverse = pow(a.value, -1, self.native_modulus) if not self._is_zero(a.value) else 0
        a_inv = ctx.assign_advice(1, inverse)
        ctx.constrain("assert_not_zero", [a.cell, a_inv.cell], lambda v: self._is_zero(v[0] * v[1] - 1))
        ctx.next()

    def to_bits(self, ctx: RegionCtx, a: AssignedValue, number_of_bits: int) -> list[AssignedCondition]:
        """Decompose `a` into `number_of_bits` conditions, least significant first.

        Each bit is constrained to be boolean and the composition `sum_i bits[i] * 2^i - a = 0` is enforced.
        If `a` does not fit in `number_of_bits` bits the composition constraint is not satisfied.
        """
        bit_values = [None] * number_of_bits
        if a.value is not None:
            bit_values = [int(bit) for bit in int_to_boolean_list(a.value, number_of_bits)]

        bits = []
        for i, bit in enumerate(bit_values):
            assigned = ctx.assign_advice(i % self.config.main_gate_width, bit)
            ctx.constrain("to_bits: boolean", [assigned.cell], lambda v: self._is_zero(v[0] * v[0] - v[0]))
            bits.append(AssignedCondition(assigned.cell, assigned.value))
            if i % self.config.main_gate_width == self.config.main_gate_width - 1:
                ctx.next()

        def composition(v: list[int]) -> bool:
            return self._is_zero(boolean_list_to_int([bit == 1 for bit in v[1:]]) - v[0])

        ctx.constrain("to_bits: composition", [a.cell, *[bit.cell for bit in bits]], composition)
        ctx.next()
        return bits
