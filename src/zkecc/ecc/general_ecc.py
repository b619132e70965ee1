"""Elliptic curve chip for curves whose scalar field is a foreign field."""

from ecpy.curves import Curve

from zkecc.circuit.region import AssignedCondition, RegionCtx
from zkecc.ecc.ecc_chip import EccChip
from zkecc.integer.integer_chip import AssignedInteger, IntegerChip
from zkecc.integer.rns import Integer, Range, Rns
from zkecc.util.ecc_params import EccConfig, default_config


class GeneralEccChip(EccChip):
    """Arithmetic over a curve whose base and scalar fields both differ from the native field.

    Scalars are foreign integers over the scalar field of the curve, handled by `scalar_field_chip`.

    Attributes:
        scalar_rns (Rns): The representation of the scalar field.
        scalar_field_chip (IntegerChip): The chip performing arithmetic over the scalar field.
    """

    def __init__(self, curve: Curve, native_modulus: int, config: EccConfig = default_config):
        super().__init__(curve, native_modulus, config)
        self.scalar_rns = Rns(curve.order, native_modulus, config.bit_len_limb)
        self.scalar_field_chip = IntegerChip(self.scalar_rns, config)

    @property
    def scalar_bit_length(self) -> int:
        return self.scalar_rns.wrong_bit_length

    def assign_scalar(self, ctx: RegionCtx, scalar: int | None) -> AssignedInteger:
        """Assign `scalar` reduced modulo the order of the curve, `None` if the witness is unknown."""
        integer = None if scalar is None else Integer.from_fe(scalar, self.scalar_rns)
        return self.scalar_field_chip.range_assign_integer(ctx, integer, Range.REMAINDER)

    def _decompose_scalar(self, ctx: RegionCtx, scalar: AssignedInteger) -> list[AssignedCondition]:
        return self.scalar_field_chip.decompose(ctx, scalar)
