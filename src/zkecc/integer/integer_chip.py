"""Gadgets over a foreign field emulated with limbs."""

from collections.abc import Callable
from dataclasses import dataclass

from zkecc.circuit.region import AssignedCondition, AssignedValue, RegionCtx
from zkecc.integer.rns import Integer, Range, Rns
from zkecc.maingate.main_gate import MainGate
from zkecc.util.ecc_params import EccConfig, default_config
from zkecc.util.utility_functions import compose, decompose, number_of_limbs_for


@dataclass(frozen=True)
class AssignedInteger:
    """A foreign field element assigned as limbs.

    Attributes:
        limbs (tuple[AssignedValue, ...]): The limbs, least significant first.
        max_val (int): Upper bound on the represented integer, enforced by the range constraints on the limbs.
        rns (Rns): The representation parameters.
    """

    limbs: tuple[AssignedValue, ...]
    max_val: int
    rns: Rns

    def value(self) -> int | None:
        """Return the represented integer (not reduced), or `None` if the witness is unknown."""
        values = [limb.value for limb in self.limbs]
        if any(value is None for value in values):
            return None
        return compose(values, self.rns.bit_len_limb)

    def integer(self) -> Integer | None:
        """Return the represented field element, or `None` if the witness is unknown."""
        value = self.value()
        return None if value is None else Integer.from_fe(value, self.rns)


def _known(*operands: AssignedInteger) -> list[int] | None:
    values = [operand.value() for operand in operands]
    return None if any(value is None for value in values) else values


class IntegerChip:
    """Construct constraints for arithmetic over F_p, where p is `rns.wrong_modulus`.

    Every operation assigns its result as fresh limbs, range-checks them against the bound tracked for the
    result, and records the integer identity linking the operands, the result and (where the identity only
    holds modulo p) a quotient witness. Operands whose bound would overflow the limb capacity are reduced
    before use.

    Attributes:
        rns (Rns): The representation parameters.
        config (EccConfig): The layout configuration.
        main_gate (MainGate): Native field gadgets used for limb-wise selection and bit decomposition.
    """

    def __init__(self, rns: Rns, config: EccConfig = default_config):
        self.rns = rns
        self.config = config
        self.main_gate = MainGate(rns.native_modulus, config)

    def _aux(self, max_val: int) -> int:
        """Smallest multiple of p that is at least `max_val`."""
        p = self.rns.wrong_modulus
        return -(-max_val // p) * p

    def _assign(self, ctx: RegionCtx, value: int | None, max_val: int) -> AssignedInteger:
        b = self.rns.bit_len_limb
        width = self.config.main_gate_width
        max_bits = max_val.bit_length()
        number_of_limbs = max(self.rns.number_of_limbs, number_of_limbs_for(max_val, b))
        limb_values = [None] * number_of_limbs if value is None else decompose(value, number_of_limbs, b)

        limbs = []
        for i, limb_value in enumerate(limb_values):
            limb = ctx.assign_advice(i % width, limb_value)
            bits = max(max_bits - i * b, 0)
            if i < number_of_limbs - 1:
                bits = min(bits, b)
            ctx.constrain(f"range: {bits} bits", [limb.cell], lambda v, bound=1 << bits: v[0] < bound)
            limbs.append(limb)
            if i % width == width - 1:
                ctx.next()
        if number_of_limbs % width != 0:
            ctx.next()

        return AssignedInteger(tuple(limbs), (1 << max_bits) - 1, self.rns)

    def _constrain(
        self, ctx: RegionCtx, name: str, operands: list[AssignedInteger], relation: Callable[..., int]
    ):
        """Record `relation(*values of operands) == 0` over the integers."""
        b = self.rns.bit_len_limb
        sizes = [len(operand.limbs) for operand in operands]
        cells = [limb.cell for operand in operands for limb in operand.limbs]

        def check(values: list[int]) -> bool:
            composed, start = [], 0
            for size in sizes:
                composed.append(compose(values[start : start + size], b))
                start += size
            return relation(*composed) == 0

        ctx.constrain(name, cells, check)
        ctx.next()

    def _reduce_if_unreduced(self, ctx: RegionCtx, a: AssignedInteger) -> AssignedInteger:
        return self.reduce(ctx, a) if a.max_val > self.rns.max_remainder else a

    def assign_integer(self, ctx: RegionCtx, integer: Integer | None) -> AssignedInteger:
        """Assign a witness that may be unreduced."""
        return self.range_assign_integer(ctx, integer, Range.OPERAND)

    def range_assign_integer(self, ctx: RegionCtx, integer: Integer | None, range_type: Range) -> AssignedInteger:
        """Assign a witness whose limbs are range-checked according to `range_type`.

        Args:
            ctx (RegionCtx): The region context.
            integer (Integer | None): The witness, `None` if unknown.
            range_type (Range): `Range.REMAINDER` bounds the value by the bit length of p, `Range.OPERAND` by the
                full limb capacity.
        """
        max_val = self.rns.max_remainder if range_type is Range.REMAINDER else self.rns.max_operand
        return self._assign(ctx, None if integer is None else integer.value, max_val)

    def assign_constant(self, ctx: RegionCtx, constant: int) -> AssignedInteger:
        """Assign the canonical representative of `constant` as fixed limbs."""
        constant %= self.rns.wrong_modulus
        limbs = tuple(self.main_gate.assign_constant(ctx, limb) for limb in Integer(constant, self.rns).limbs())
        return AssignedInteger(limbs, constant, self.rns)

    def add(self, ctx: RegionCtx, a: AssignedInteger, b: AssignedInteger) -> AssignedInteger:
        """Return a + b (unreduced)."""
        if a.max_val + b.max_val > self.rns.max_operand:
            a = self._reduce_if_unreduced(ctx, a)
            b = self._reduce_if_unreduced(ctx, b)
        values = _known(a, b)
        c = self._assign(ctx, None if values is None else sum(values), a.max_val + b.max_val)
        self._constrain(ctx, "add", [a, b, c], lambda a, b, c: a + b - c)
        return c

    def add_constant(self, ctx: RegionCtx, a: AssignedInteger, constant: int) -> AssignedInteger:
        """Return a + constant (unreduced)."""
        constant %= self.rns.wrong_modulus
        if a.max_val + constant > self.rns.max_operand:
            a = self._reduce_if_unreduced(ctx, a)
        value = a.value()
        c = self._assign(ctx, None if value is None else value + constant, a.max_val + constant)
        self._constrain(ctx, "add_constant", [a, c], lambda a, c: a + constant - c)
        return c

    def sub(self, ctx: RegionCtx, a: AssignedInteger, b: AssignedInteger) -> AssignedInteger:
        """Return a - b + aux, where aux is a multiple of p making the result non-negative."""
        if a.max_val + self._aux(b.max_val) > self.rns.max_operand:
            a = self._reduce_if_unreduced(ctx, a)
            b = self._reduce_if_unreduced(ctx, b)
        aux = self._aux(b.max_val)
        values = _known(a, b)
        c = self._assign(ctx, None if values is None else values[0] - values[1] + aux, a.max_val + aux)
        self._constrain(ctx, "sub", [a, b, c], lambda a, b, c: a - b + aux - c)
        return c

    def neg(self, ctx: RegionCtx, a: AssignedInteger) -> AssignedInteger:
        """Return aux - a, where aux is a multiple of p not smaller than a."""
        aux = self._aux(a.max_val)
        value = a.value()
        c = self._assign(ctx, None if value is None else aux - value, aux)
        self._constrain(ctx, "neg", [a, c], lambda a, c: aux - a - c)
        return c

    def mul(self, ctx: RegionCtx, a: AssignedInteger, b: AssignedInteger) -> AssignedInteger:
        """Return a * b reduced modulo p.

        Witnesses the quotient q and the remainder r and constrains `a * b - q * p - r = 0`.
        """
        p = self.rns.wrong_modulus
        values = _known(a, b)
        q, r = (None, None) if values is None else divmod(values[0] * values[1], p)
        q = self._assign(ctx, q, a.max_val * b.max_val // p)
        r = self._assign(ctx, r, self.rns.max_remainder)
        self._constrain(ctx, "mul", [a, b, q, r], lambda a, b, q, r: a * b - q * p - r)
        return r

    def square(self, ctx: RegionCtx, a: AssignedInteger) -> AssignedInteger:
        """Return a^2 reduced modulo p."""
        return self.mul(ctx, a, a)

    def div_incomplete(self, ctx: RegionCtx, a: AssignedInteger, b: AssignedInteger) -> AssignedInteger:
        """Return a / b modulo p.

        Witnesses c and q and constrains `c * b + aux - a - q * p = 0`. The gadget is incomplete: when b is
        zero modulo p the witness c is set to zero and the constraint is unsatisfiable unless a is zero too.
        """
        p = self.rns.wrong_modulus
        aux = self._aux(a.max_val)
        c_value, q_value = None, None
        values = _known(a, b)
        if values is not None:
            a_value, b_value = values
            c_value = a_value * pow(b_value, -1, p) % p if b_value % p != 0 else 0
            q_value = (c_value * b_value + aux - a_value) // p
        c = self._assign(ctx, c_value, self.rns.max_remainder)
        q = self._assign(ctx, q_value, (self.rns.max_remainder * b.max_val + aux) // p)
        self._constrain(ctx, "div", [a, b, c, q], lambda a, b, c, q: c * b + aux - a - q * p)
        return c

    def reduce(self, ctx: RegionCtx, a: AssignedInteger) -> AssignedInteger:
        """Return the remainder of a modulo p, bounded by the bit length of p."""
        p = self.rns.wrong_modulus
        value = a.value()
        q, r = (None, None) if value is None else divmod(value, p)
        q = self._assign(ctx, q, a.max_val // p)
        r = self._assign(ctx, r, self.rns.max_remainder)
        self._constrain(ctx, "reduce", [a, q, r], lambda a, q, r: a - q * p - r)
        return r

    def assert_zero(self, ctx: RegionCtx, a: AssignedInteger):
        """Constrain a to be a multiple of p."""
        p = self.rns.wrong_modulus
        value = a.value()
        q = self._assign(ctx, None if value is None else value // p, a.max_val // p)
        self._constrain(ctx, "assert_zero", [a, q], lambda a, q: a - q * p)

    def assert_not_zero(self, ctx: RegionCtx, a: AssignedInteger):
        """Constrain a to be invertible modulo p.

        Witnesses the inverse w and q and constrains `a * w - 1 - q * p = 0`.
        """
        p = self.rns.wrong_modulus
        w_value, q_value = None, None
        value = a.value()
        if value is not None:
            w_value = pow(value, -1, p) if value % p != 0 else 0
            q_value = (value * w_value - 1) // p if value * w_value >= 1 else 0
        w = self._assign(ctx, w_value, self.rns.max_remainder)
        q = self._assign(ctx, q_value, a.max_val * self.rns.max_remainder // p)
        self._constrain(ctx, "assert_not_zero", [a, w, q], lambda a, w, q: a * w - 1 - q * p)

    def assert_equal(self, ctx: RegionCtx, a: AssignedInteger, b: AssignedInteger):
        """Constrain a = b modulo p."""
        self.assert_zero(ctx, self.sub(ctx, a, b))

    def assert_not_equal(self, ctx: RegionCtx, a: AssignedInteger, b: AssignedInteger):
        """Constrain a != b modulo p."""
        self.assert_not_zero(ctx, self.sub(ctx, a, b))

    def select(
        self, ctx: RegionCtx, a: AssignedInteger, b: AssignedInteger, cond: AssignedCondition
    ) -> AssignedInteger:
        """Return a if `cond` is 1, b otherwise."""
        assert len(a.limbs) == len(b.limbs), "Operands of select must have the same number of limbs"
        limbs = tuple(
            self.main_gate.select(ctx, limb_a, limb_b, cond) for limb_a, limb_b in zip(a.limbs, b.limbs)
        )
        return AssignedInteger(limbs, max(a.max_val, b.max_val), self.rns)

    def select_or_assign(
        self, ctx: RegionCtx, a: AssignedInteger, b: Integer, cond: AssignedCondition
    ) -> AssignedInteger:
        """Return a if `cond` is 1, the constant b otherwise."""
        limbs_b = decompose(b.value, len(a.limbs), self.rns.bit_len_limb)
        limbs = tuple(
            self.main_gate.select_or_assign(ctx, limb_a, limb_b, cond) for limb_a, limb_b in zip(a.limbs, limbs_b)
        )
        return AssignedInteger(limbs, max(a.max_val, b.value), self.rns)

    def decompose(self, ctx: RegionCtx, a: AssignedInteger) -> list[AssignedCondition]:
        """Reduce a and return its `rns.wrong_bit_length` bits, least significant first."""
        r = self.reduce(ctx, a)
        b = self.rns.bit_len_limb
        bits = []
        for i, limb in enumerate(r.limbs):
            bits.extend(self.main_gate.to_bits(ctx, limb, min(b, self.rns.wrong_bit_length - i * b)))
        return bits
