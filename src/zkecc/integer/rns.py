"""Limb representation of foreign field elements over the native field."""

from dataclasses import dataclass
from enum import Enum
from math import ceil

from zkecc.util.utility_functions import decompose


class Range(Enum):
    """Bound enforced when an integer is assigned.

    REMAINDER: the value has at most as many bits as the wrong modulus.
    OPERAND: the value fits in the full limb capacity, it may be unreduced.
    """

    REMAINDER = "remainder"
    OPERAND = "operand"


@dataclass(frozen=True)
class Rns:
    """Parameters of the representation of F_p (the wrong field) over F_n (the native field).

    An element of F_p is written as `number_of_limbs` limbs of `bit_len_limb` bits, each limb being a native
    field element. One `Rns` is built per foreign field and shared by every integer of that field.

    Attributes:
        wrong_modulus (int): The characteristic p of the emulated field.
        native_modulus (int): The characteristic n of the native field.
        bit_len_limb (int): The bit length of the limbs.
    """

    wrong_modulus: int
    native_modulus: int
    bit_len_limb: int

    def __post_init__(self):
        if self.wrong_modulus <= 1:
            msg = f"The wrong modulus must be greater than 1: wrong_modulus: {self.wrong_modulus}"
            raise ValueError(msg)
        if self.bit_len_limb <= 0:
            msg = f"The limb bit length must be a positive integer: bit_len_limb: {self.bit_len_limb}"
            raise ValueError(msg)
        if 1 << self.bit_len_limb >= self.native_modulus:
            msg = f"Limbs must fit in the native field: bit_len_limb: {self.bit_len_limb}, \
                native_modulus: {self.native_modulus}"
            raise ValueError(msg)

    @property
    def wrong_bit_length(self) -> int:
        return self.wrong_modulus.bit_length()

    @property
    def number_of_limbs(self) -> int:
        return ceil(self.wrong_bit_length / self.bit_len_limb)

    @property
    def max_remainder(self) -> int:
        """Largest value of a reduced integer."""
        return (1 << self.wrong_bit_length) - 1

    @property
    def max_operand(self) -> int:
        """Largest value an unreduced integer may take before it has to be reduced."""
        return (1 << (self.number_of_limbs * self.bit_len_limb)) - 1


@dataclass(frozen=True)
class Integer:
    """A foreign field element known off-circuit."""

    value: int
    rns: Rns

    @staticmethod
    def from_fe(value: int, rns: Rns) -> "Integer":
        """Return the canonical representative of `value` modulo `rns.wrong_modulus`."""
        return Integer(value % rns.wrong_modulus, rns)

    def limbs(self) -> list[int]:
        return decompose(self.value, self.rns.number_of_limbs, self.rns.bit_len_limb)
