"""Configuration of the elliptic curve chips."""

from dataclasses import dataclass


@dataclass(frozen=True)
class EccConfig:
    """Layout parameters shared by the chips of one circuit.

    Attributes:
        bit_len_limb (int): Bit length of the limbs used to represent foreign field elements. Defaults to `68`.
        main_gate_width (int): Number of advice columns of the main gate. Defaults to `5`.
    """

    bit_len_limb: int = 68
    main_gate_width: int = 5

    def __post_init__(self):
        if self.bit_len_limb <= 0:
            msg = f"The limb bit length must be a positive integer: bit_len_limb: {self.bit_len_limb}"
            raise ValueError(msg)
        if self.main_gate_width < 4:
            msg = f"The main gate needs at least four columns: main_gate_width: {self.main_gate_width}"
            raise ValueError(msg)

    def with_overrides(self, **overrides) -> "EccConfig":
        """Return a copy of `self` with the attributes in `overrides` replaced."""
        params = {"bit_len_limb": self.bit_len_limb, "main_gate_width": self.main_gate_width}
        for key, value in overrides.items():
            if key not in params:
                msg = f"EccConfig has no attribute '{key}'"
                raise AttributeError(msg)
            params[key] = value
        return EccConfig(**params)


default_config = EccConfig()
