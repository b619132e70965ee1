"""Elliptic curve arithmetic over a foreign base field."""

import logging
from abc import ABC, abstractmethod

from ecpy.curves import Curve
from ecpy.curves import Point as CurvePoint

from zkecc.circuit.region import AssignedCondition, ConstraintSystem, RegionCtx
from zkecc.ecc.point import AssignedPoint, MulAux, Point, Selector, Table, Windowed, make_mul_aux
from zkecc.errors import SynthesisError
from zkecc.integer.integer_chip import IntegerChip
from zkecc.integer.rns import Integer, Range, Rns
from zkecc.util.ecc_params import EccConfig, default_config

logger = logging.getLogger(__name__)


class EccChip(ABC):
    """Construct constraints for the arithmetic of the curve E: y^2 = x^3 + a*x + b over F_q.

    Coordinates are foreign integers over F_q handled by `integer_chip`. The point at infinity cannot be
    assigned, and the addition formulas are incomplete: `add` rejects operands sharing an x coordinate, while
    `double` and `ladder` assume their inputs are valid. Scalar multiplications stay within the domain of the
    incomplete formulas by offsetting the accumulator with an auxiliary point of unknown discrete logarithm,
    which is assigned once per chip with `assign_aux_generator`. The cancelling points are registered per
    (window size, number of pairs) with `assign_aux`.

    Subclasses define how a scalar is assigned and decomposed.

    Attributes:
        curve (Curve): The ECPy curve.
        native_modulus (int): The characteristic of the native field of the circuit.
        config (EccConfig): The layout configuration.
        rns (Rns): The representation of the base field F_q.
        integer_chip (IntegerChip): The chip performing arithmetic over F_q.
        main_gate (MainGate): The native field gadgets.
        aux_generator (tuple[AssignedPoint, CurvePoint | None] | None): The assigned auxiliary generator and
            its value.
        aux_registry (dict[tuple[int, int], AssignedPoint]): The cancelling points, keyed by
            (window size, number of pairs).
    """

    def __init__(self, curve: Curve, native_modulus: int, config: EccConfig = default_config):
        self.curve = curve
        self.native_modulus = native_modulus
        self.config = config
        self.rns = Rns(curve.field, native_modulus, config.bit_len_limb)
        self.integer_chip = IntegerChip(self.rns, config)
        self.main_gate = self.integer_chip.main_gate
        self.aux_generator = None
        self.aux_registry = {}

    @property
    @abstractmethod
    def scalar_bit_length(self) -> int:
        """The number of bits a scalar is decomposed into."""

    @abstractmethod
    def _decompose_scalar(self, ctx: RegionCtx, scalar) -> list[AssignedCondition]:
        """Return the `scalar_bit_length` bits of `scalar`, least significant first."""

    def parameter_a(self) -> Integer:
        return Integer.from_fe(self.curve.a, self.rns)

    def parameter_b(self) -> Integer:
        return Integer.from_fe(self.curve.b, self.rns)

    def to_point(self, point: CurvePoint) -> Point:
        return Point.from_curve_point(point, self.rns)

    # Point primitives

    def assign_point(self, ctx: RegionCtx, point: CurvePoint | None) -> AssignedPoint:
        """Assign a witness point and constrain it to be on the curve.

        Args:
            ctx (RegionCtx): The region context.
            point (CurvePoint | None): The point, `None` if the witness is unknown.

        Returns:
            The assigned point, with coordinates range-checked as reduced integers.

        Raises:
            SynthesisError: If `point` is the point at infinity.
        """
        x, y = None, None
        if point is not None:
            point = self.to_point(point)
            x, y = point.x, point.y
        x = self.integer_chip.range_assign_integer(ctx, x, Range.REMAINDER)
        y = self.integer_chip.range_assign_integer(ctx, y, Range.REMAINDER)
        assigned = AssignedPoint(x, y)
        self.assert_is_on_curve(ctx, assigned)
        return assigned

    def assign_constant(self, ctx: RegionCtx, point: CurvePoint) -> AssignedPoint:
        """Assign `point` with fixed coordinates.

        Raises:
            SynthesisError: If `point` is the point at infinity.
        """
        point = self.to_point(point)
        x = self.integer_chip.assign_constant(ctx, point.x.value)
        y = self.integer_chip.assign_constant(ctx, point.y.value)
        return AssignedPoint(x, y)

    def assert_is_on_curve(self, ctx: RegionCtx, point: AssignedPoint):
        """Constrain `y^2 = x^3 + a*x + b`."""
        y_square = self.integer_chip.square(ctx, point.y)
        x_square = self.integer_chip.square(ctx, point.x)
        x_cube = self.integer_chip.mul(ctx, point.x, x_square)
        if self.parameter_a().value != 0:
            a = self.integer_chip.assign_constant(ctx, self.parameter_a().value)
            a_x = self.integer_chip.mul(ctx, a, point.x)
            x_cube = self.integer_chip.add(ctx, x_cube, a_x)
        x_cube_b = self.integer_chip.add_constant(ctx, x_cube, self.parameter_b().value)
        self.integer_chip.assert_equal(ctx, x_cube_b, y_square)

    def assert_equal(self, ctx: RegionCtx, p0: AssignedPoint, p1: AssignedPoint):
        self.integer_chip.assert_equal(ctx, p0.x, p1.x)
        self.integer_chip.assert_equal(ctx, p0.y, p1.y)

    def select(self, ctx: RegionCtx, c: AssignedCondition, p1: AssignedPoint, p2: AssignedPoint) -> AssignedPoint:
        """Return `p1` if `c` is 1, `p2` otherwise."""
        x = self.integer_chip.select(ctx, p1.x, p2.x, c)
        y = self.integer_chip.select(ctx, p1.y, p2.y, c)
        return AssignedPoint(x, y)

    def select_or_assign(
        self, ctx: RegionCtx, c: AssignedCondition, p1: AssignedPoint, p2: CurvePoint
    ) -> AssignedPoint:
        """Return `p1` if `c` is 1, the constant point `p2` otherwise."""
        p2 = self.to_point(p2)
        x = self.integer_chip.select_or_assign(ctx, p1.x, p2.x, c)
        y = self.integer_chip.select_or_assign(ctx, p1.y, p2.y, c)
        return AssignedPoint(x, y)

    def normalize(self, ctx: RegionCtx, point: AssignedPoint) -> AssignedPoint:
        """Reduce both coordinates."""
        x = self.integer_chip.reduce(ctx, point.x)
        y = self.integer_chip.reduce(ctx, point.y)
        return AssignedPoint(x, y)

    def neg(self, ctx: RegionCtx, point: AssignedPoint) -> AssignedPoint:
        y = self.integer_chip.reduce(ctx, self.integer_chip.neg(ctx, point.y))
        return AssignedPoint(point.x, y)

    def expose_public(self, cs: ConstraintSystem, point: AssignedPoint, offset: int):
        """Bind the limbs of `point` to the public inputs starting at row `offset`.

        The coordinates are normalized in a dedicated region, then the limbs of x followed by the limbs of y are
        copied to consecutive instance rows, in the order given by `Point.public`.
        """
        ctx = RegionCtx(cs.assign_region("expose public"))
        point = self.normalize(ctx, point)
        for i, limb in enumerate([*point.x.limbs, *point.y.limbs]):
            cs.constrain_instance(limb, offset + i)

    # Incomplete arithmetic

    def add(self, ctx: RegionCtx, p0: AssignedPoint, p1: AssignedPoint) -> AssignedPoint:
        """Return `p0 + p1`.

        The operands are constrained to have distinct x coordinates, so doubling and adding a point to its
        opposite are unsatisfiable.
        """
        self.integer_chip.assert_not_equal(ctx, p0.x, p1.x)
        return self._add_incomplete_unsafe(ctx, p0, p1)

    def _add_incomplete_unsafe(self, ctx: RegionCtx, p0: AssignedPoint, p1: AssignedPoint) -> AssignedPoint:
        chip = self.integer_chip
        # lambda = (y_1 - y_0) / (x_1 - x_0)
        numerator = chip.sub(ctx, p1.y, p0.y)
        denominator = chip.sub(ctx, p1.x, p0.x)
        lambda_ = chip.div_incomplete(ctx, numerator, denominator)
        # x = lambda^2 - x_0 - x_1
        lambda_square = chip.square(ctx, lambda_)
        x = chip.reduce(ctx, chip.sub(ctx, chip.sub(ctx, lambda_square, p0.x), p1.x))
        # y = lambda * (x_0 - x) - y_0
        t = chip.mul(ctx, lambda_, chip.sub(ctx, p0.x, x))
        y = chip.reduce(ctx, chip.sub(ctx, t, p0.y))
        return AssignedPoint(x, y)

    def double(self, ctx: RegionCtx, point: AssignedPoint) -> AssignedPoint:
        """Return `2 * point`, assuming `point` is on the curve and its y coordinate is not zero."""
        chip = self.integer_chip
        # lambda = (3 * x^2 + a) / (2 * y)
        x_square = chip.square(ctx, point.x)
        numerator = chip.add(ctx, chip.add(ctx, x_square, x_square), x_square)
        if self.parameter_a().value != 0:
            numerator = chip.add_constant(ctx, numerator, self.parameter_a().value)
        denominator = chip.add(ctx, point.y, point.y)
        lambda_ = chip.div_incomplete(ctx, numerator, denominator)
        # x = lambda^2 - 2 * x_0
        lambda_square = chip.square(ctx, lambda_)
        x = chip.reduce(ctx, chip.sub(ctx, chip.sub(ctx, lambda_square, point.x), point.x))
        # y = lambda * (x_0 - x) - y_0
        t = chip.mul(ctx, lambda_, chip.sub(ctx, point.x, x))
        y = chip.reduce(ctx, chip.sub(ctx, t, point.y))
        return AssignedPoint(x, y)

    def double_n(self, ctx: RegionCtx, point: AssignedPoint, n: int) -> AssignedPoint:
        """Return `2^n * point`."""
        for _ in range(n):
            point = self.double(ctx, point)
        return point

    def ladder(self, ctx: RegionCtx, to_double: AssignedPoint, to_add: AssignedPoint) -> AssignedPoint:
        """Return `2 * to_double + to_add` without computing the intermediate doubling.

        With P = `to_double` and Q = `to_add`:

            lambda_1 = (y_Q - y_P) / (x_Q - x_P)
            x_2 = lambda_1^2 - x_P - x_Q
            lambda_2 = 2 * y_P / (x_P - x_2) - lambda_1
            x = lambda_2^2 - x_P - x_2
            y = lambda_2 * (x_P - x) - y_P

        The operands must have distinct x coordinates, and so must P and P + Q. This is not constrained.
        """
        chip = self.integer_chip
        p, q = to_double, to_add

        numerator = chip.sub(ctx, q.y, p.y)
        denominator = chip.sub(ctx, q.x, p.x)
        lambda_1 = chip.div_incomplete(ctx, numerator, denominator)

        x_2 = chip.sub(ctx, chip.sub(ctx, chip.square(ctx, lambda_1), p.x), q.x)

        numerator = chip.add(ctx, p.y, p.y)
        denominator = chip.sub(ctx, p.x, x_2)
        lambda_2 = chip.sub(ctx, chip.div_incomplete(ctx, numerator, denominator), lambda_1)
        lambda_2 = chip.reduce(ctx, lambda_2)

        x = chip.reduce(ctx, chip.sub(ctx, chip.sub(ctx, chip.square(ctx, lambda_2), p.x), x_2))
        t = chip.mul(ctx, lambda_2, chip.sub(ctx, p.x, x))
        y = chip.reduce(ctx, chip.sub(ctx, t, p.y))
        return AssignedPoint(x, y)

    # Auxiliary points

    def assign_aux_generator(self, ctx: RegionCtx, point: CurvePoint | None):
        """Assign the auxiliary generator used by every scalar multiplication of this chip.

        Raises:
            SynthesisError: If the auxiliary generator was already assigned.
        """
        if self.aux_generator is not None:
            msg = "The auxiliary generator is already assigned"
            raise SynthesisError(msg)
        self.aux_generator = (self.assign_point(ctx, point), point)

    def assign_aux(self, ctx: RegionCtx, window_size: int, number_of_pairs: int):
        """Assign the point cancelling the auxiliary generator for (`window_size`, `number_of_pairs`).

        Raises:
            SynthesisError: If the auxiliary generator is not assigned, if the point for this key is already
                assigned, or if `window_size` or `number_of_pairs` is zero.
        """
        if self.aux_generator is None:
            msg = "The auxiliary generator must be assigned before the auxiliary points"
            raise SynthesisError(msg)
        key = (window_size, number_of_pairs)
        if key in self.aux_registry:
            msg = f"Auxiliary point already assigned: window_size: {window_size}, number_of_pairs: {number_of_pairs}"
            raise SynthesisError(msg)
        if window_size < 1 or number_of_pairs < 1:
            msg = f"Window size and number of pairs must be positive: window_size: {window_size}, \
                number_of_pairs: {number_of_pairs}"
            raise SynthesisError(msg)

        _, generator = self.aux_generator
        to_sub = None
        if generator is not None:
            to_sub = make_mul_aux(generator, window_size, number_of_pairs, self.scalar_bit_length)
        self.aux_registry[key] = self.assign_point(ctx, to_sub)
        logger.debug("Assigned auxiliary point: window_size: %d, number_of_pairs: %d", *key)

    def get_mul_aux(self, window_size: int, number_of_pairs: int) -> MulAux:
        """Return the auxiliary points of a multiplication.

        Raises:
            SynthesisError: If the auxiliary generator or the point for this key is not assigned.
        """
        if self.aux_generator is None:
            msg = "The auxiliary generator is not assigned"
            raise SynthesisError(msg)
        to_sub = self.aux_registry.get((window_size, number_of_pairs))
        if to_sub is None:
            msg = f"Auxiliary point not assigned: window_size: {window_size}, number_of_pairs: {number_of_pairs}"
            raise SynthesisError(msg)
        return MulAux(self.aux_generator[0], to_sub)

    # Scalar multiplication

    def _window(self, ctx: RegionCtx, bits: list[AssignedCondition], window_size: int) -> Windowed:
        """Split `bits` (least significant first) into windows, most significant window first.

        The bits are padded with constant zeros up to a multiple of `window_size`.
        """
        bits = list(bits)
        padding = -len(bits) % window_size
        bits.extend(self.main_gate.assign_constant_bit(ctx, 0) for _ in range(padding))
        bits.reverse()
        return Windowed(
            [
                Selector(bits[i : i + window_size][::-1])
                for i in range(0, len(bits), window_size)
            ]
        )

    def _make_incremental_table(
        self, ctx: RegionCtx, aux: AssignedPoint, point: AssignedPoint, window_size: int
    ) -> Table:
        """Return the table `aux + i * point` for `i` in `[0, 2^window_size)`."""
        table = [aux]
        for _ in range((1 << window_size) - 1):
            table.append(self.add(ctx, table[-1], point))
        return Table(table)

    def _select_multi(self, ctx: RegionCtx, selector: Selector, table: Table) -> AssignedPoint:
        """Return `table[i]` where `i` is the integer whose bits are `selector`."""
        if len(table) != 1 << len(selector):
            msg = f"The table size must match the selector length: table: {len(table)}, selector: {len(selector)}"
            raise SynthesisError(msg)
        reducer = table.points
        for bit in selector.bits:
            reducer = [self.select(ctx, bit, reducer[2 * j + 1], reducer[2 * j]) for j in range(len(reducer) // 2)]
        return reducer[0]

    def mul(self, ctx: RegionCtx, point: AssignedPoint, scalar, window_size: int) -> AssignedPoint:
        """Return `scalar * point`.

        The scalar is processed in windows of `window_size` bits, most significant first. The accumulator
        starts at `aux + w_0 * point`, and every following window doubles it `window_size` times and adds
        `aux + w_i * point` (the last doubling fused with the addition in a ladder step). The auxiliary
        contribution is removed at the end with the point registered under (`window_size`, 1).

        The result of a multiplication by zero (or by a multiple of the order of `point`) is the point at
        infinity, which is not representable: the final addition is then unsatisfiable.

        Args:
            ctx (RegionCtx): The region context.
            point (AssignedPoint): The point to multiply.
            scalar: The assigned scalar, as expected by `_decompose_scalar`.
            window_size (int): The number of bits per window.

        Returns:
            The assigned point `scalar * point`.

        Raises:
            SynthesisError: If `window_size` is zero, if the scalar is split into fewer than two windows, or if
                the auxiliary points for (`window_size`, 1) are not assigned.
        """
        if window_size < 1:
            msg = f"The window size must be positive: window_size: {window_size}"
            raise SynthesisError(msg)
        aux = self.get_mul_aux(window_size, 1)

        decomposed = self._decompose_scalar(ctx, scalar)
        windowed = self._window(ctx, decomposed, window_size)
        if len(windowed) < 2:
            msg = f"Scalar multiplication needs at least two windows: window_size: {window_size}, \
                scalar_bit_length: {self.scalar_bit_length}"
            raise SynthesisError(msg)
        table = self._make_incremental_table(ctx, aux.to_add, point, window_size)
        logger.debug("mul: %d windows of %d bits, table of %d points", len(windowed), window_size, len(table))

        selectors = windowed.selectors
        acc = self._select_multi(ctx, selectors[0], table)
        acc = self.double_n(ctx, acc, window_size)
        acc = self.add(ctx, acc, self._select_multi(ctx, selectors[1], table))
        for selector in selectors[2:]:
            acc = self.double_n(ctx, acc, window_size - 1)
            acc = self.ladder(ctx, acc, self._select_multi(ctx, selector, table))

        return self.add(ctx, acc, aux.to_sub)

    def mul_batch_1d_horizontal(self, ctx: RegionCtx, pairs: list[tuple], window_size: int) -> AssignedPoint:
        """Return the sum of `scalar * point` over the (point, scalar) `pairs`.

        All pairs share one accumulator and one doubling schedule. The table of pair `i` is rooted at
        `2^i * aux`, so the first window contributes `(2^n - 1) * aux` for `n` pairs, which the point
        registered under (`window_size`, `n`) removes at the end.

        Raises:
            SynthesisError: If `window_size` is zero, if `pairs` is empty, or if the auxiliary points for
                (`window_size`, `len(pairs)`) are not assigned.
        """
        number_of_pairs = len(pairs)
        if window_size < 1 or number_of_pairs < 1:
            msg = f"Window size and number of pairs must be positive: window_size: {window_size}, \
                number_of_pairs: {number_of_pairs}"
            raise SynthesisError(msg)
        aux = self.get_mul_aux(window_size, number_of_pairs)

        windowed = [
            self._window(ctx, self._decompose_scalar(ctx, scalar), window_size) for _, scalar in pairs
        ]
        number_of_windows = len(windowed[0])
        if any(len(w) != number_of_windows for w in windowed):
            msg = "Scalars must be decomposed into the same number of windows"
            raise SynthesisError(msg)

        binary_aux = aux.to_add
        tables = []
        for i, (point, _) in enumerate(pairs):
            tables.append(self._make_incremental_table(ctx, binary_aux, point, window_size))
            if i != number_of_pairs - 1:
                binary_aux = self.double(ctx, binary_aux)
        logger.debug(
            "mul_batch_1d_horizontal: %d pairs, %d windows of %d bits", number_of_pairs, number_of_windows, window_size
        )

        acc = self._select_multi(ctx, windowed[0].selectors[0], tables[0])
        for j in range(1, number_of_pairs):
            acc = self.add(ctx, acc, self._select_multi(ctx, windowed[j].selectors[0], tables[j]))
        for i in range(1, number_of_windows):
            acc = self.double_n(ctx, acc, window_size)
            for j in range(number_of_pairs):
                acc = self.add(ctx, acc, self._select_multi(ctx, windowed[j].selectors[i], tables[j]))

        return self.add(ctx, acc, aux.to_sub)
