"""Elliptic curve chip for curves whose scalar field is the native field."""

from ecpy.curves import Curve

from zkecc.circuit.region import AssignedCondition, AssignedValue, RegionCtx
from zkecc.ecc.ecc_chip import EccChip
from zkecc.util.ecc_params import EccConfig, default_config


class BaseFieldEccChip(EccChip):
    """Arithmetic over a curve whose group order is the native modulus, e.g. BN254 G1 in a BN254 circuit.

    Scalars are native `AssignedValue`s, decomposed into bits by the main gate.
    """

    def __init__(self, curve: Curve, config: EccConfig = default_config):
        """Initialise the chip.

        Args:
            curve (Curve): The ECPy curve. Its order is used as the native modulus.
            config (EccConfig): The layout configuration. Defaults to `default_config`.
        """
        super().__init__(curve, curve.order, config)

    @property
    def scalar_bit_length(self) -> int:
        return self.native_modulus.bit_length()

    def assign_scalar(self, ctx: RegionCtx, scalar: int | None) -> AssignedValue:
        return self.main_gate.assign_value(ctx, scalar)

    def _decompose_scalar(self, ctx: RegionCtx, scalar: AssignedValue) -> list[AssignedCondition]:
        return self.main_gate.to_bits(ctx, scalar, self.scalar_bit_length)
