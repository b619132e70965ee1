"""Point types shared by the elliptic curve chips."""

from dataclasses import dataclass
from math import ceil

from ecpy.curves import Point as CurvePoint

from zkecc.circuit.region import AssignedCondition
from zkecc.errors import SynthesisError
from zkecc.integer.integer_chip import AssignedInteger
from zkecc.integer.rns import Integer, Rns


@dataclass(frozen=True)
class Point:
    """An affine point known off-circuit, with coordinates in the limb representation.

    Attributes:
        x (Integer): The x coordinate.
        y (Integer): The y coordinate.
    """

    x: Integer
    y: Integer

    @staticmethod
    def from_curve_point(point: CurvePoint, rns: Rns) -> "Point":
        """Convert an ECPy point.

        Raises:
            SynthesisError: If `point` is the point at infinity, which has no affine representation.
        """
        if point.is_infinity:
            msg = "The point at infinity cannot be represented in affine coordinates"
            raise SynthesisError(msg)
        return Point(Integer.from_fe(point.x, rns), Integer.from_fe(point.y, rns))

    def public(self) -> list[int]:
        """Return the public inputs matching `EccChip.expose_public`: the limbs of x, then the limbs of y.

        Example:
            >>> from zkecc.curves import BN254_SCALAR_MODULUS, secp256k1
            >>> rns = Rns(secp256k1.field, BN254_SCALAR_MODULUS, 68)
            >>> len(Point.from_curve_point(secp256k1.generator, rns).public())
            8
        """
        return [*self.x.limbs(), *self.y.limbs()]


@dataclass(frozen=True)
class AssignedPoint:
    """An affine point assigned in the circuit.

    Attributes:
        x (AssignedInteger): The x coordinate.
        y (AssignedInteger): The y coordinate.
    """

    x: AssignedInteger
    y: AssignedInteger

    def coordinates(self) -> tuple[int, int] | None:
        """Return the coordinates reduced modulo the base field, or `None` if the witness is unknown."""
        x, y = self.x.integer(), self.y.integer()
        if x is None or y is None:
            return None
        return x.value, y.value


@dataclass(frozen=True)
class MulAux:
    """Auxiliary points of a scalar multiplication.

    `to_add` seeds the tables of the multiplication; `to_sub` cancels everything `to_add` contributed once
    the doubling schedule has run.
    """

    to_add: AssignedPoint
    to_sub: AssignedPoint


@dataclass(frozen=True)
class Selector:
    """The bits of one window, least significant first."""

    bits: list[AssignedCondition]

    def __len__(self) -> int:
        return len(self.bits)


@dataclass(frozen=True)
class Windowed:
    """The windows of a scalar, most significant window first."""

    selectors: list[Selector]

    def __len__(self) -> int:
        return len(self.selectors)


@dataclass(frozen=True)
class Table:
    """The points `aux + i * P` for `i` in `[0, 2^window_size)`."""

    points: list[AssignedPoint]

    def __len__(self) -> int:
        return len(self.points)


def make_mul_aux(
    aux_to_add: CurvePoint, window_size: int, number_of_pairs: int, number_of_bits: int
) -> CurvePoint:
    """Compute the point that cancels `aux_to_add` at the end of a windowed multiplication.

    A multiplication of `number_of_pairs` pairs over `ceil(number_of_bits / window_size)` windows seeds the
    accumulator with `(2^number_of_pairs - 1) * aux_to_add` and doubles it `window_size` times per window.
    The returned point is `-k * aux_to_add` with

        k = (2^number_of_pairs - 1) * sum_{i < number_of_windows} 2^(i * window_size)

    Args:
        aux_to_add (CurvePoint): The auxiliary generator.
        window_size (int): The window size of the multiplication.
        number_of_pairs (int): The number of (point, scalar) pairs of the multiplication.
        number_of_bits (int): The bit length of the scalars.

    Returns:
        The point `-k * aux_to_add`.

    Raises:
        SynthesisError: If `window_size` or `number_of_pairs` is zero, or if the result is the point at infinity.
    """
    if window_size < 1 or number_of_pairs < 1:
        msg = f"Window size and number of pairs must be positive: window_size: {window_size}, \
            number_of_pairs: {number_of_pairs}"
        raise SynthesisError(msg)

    number_of_windows = ceil(number_of_bits / window_size)
    k0 = sum(1 << (i * window_size) for i in range(number_of_windows))
    k = k0 * ((1 << number_of_pairs) - 1)

    to_sub = -(k * aux_to_add)
    if to_sub.is_infinity:
        msg = f"The auxiliary point vanishes: window_size: {window_size}, number_of_pairs: {number_of_pairs}"
        raise SynthesisError(msg)
    return to_sub
