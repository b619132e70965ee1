"""Utility functions."""

from math import ceil


def decompose(value: int, number_of_limbs: int, bit_len_limb: int) -> list[int]:
    """Split `value` into `number_of_limbs` limbs of `bit_len_limb` bits, least significant first.

    The most significant limb absorbs whatever does not fit in the lower ones.

    Example:
        >>> decompose(0x1234, 2, 8)
        [52, 18]
        >>> decompose(0x1234, 1, 8)
        [4660]
    """
    mask = (1 << bit_len_limb) - 1
    limbs = []
    for _ in range(number_of_limbs - 1):
        limbs.append(value & mask)
        value >>= bit_len_limb
    limbs.append(value)
    return limbs


def compose(limbs: list[int], bit_len_limb: int) -> int:
    """Inverse of `decompose`.

    Example:
        >>> compose([52, 18], 8)
        4660
    """
    out = 0
    for limb in reversed(limbs):
        out = (out << bit_len_limb) + limb
    return out


def number_of_limbs_for(value: int, bit_len_limb: int) -> int:
    """Return the number of limbs needed to represent integers up to `value`."""
    return max(ceil(value.bit_length() / bit_len_limb), 1)


def int_to_boolean_list(value: int, list_length: int) -> list[bool]:
    """Convert `value` to the list of its `list_length` least significant bits, least significant first.

    Example:
        >>> int_to_boolean_list(6, 4)
        [False, True, True, False]
    """
    return [bool((value >> i) & 1) for i in range(list_length)]


def boolean_list_to_int(boolean_list: list[bool]) -> int:
    """Convert a list of True, False (least significant first) into an integer.

    Example:
        >>> boolean_list_to_int([False, True, True])
        6
    """
    out = 0
    for ix, bit in enumerate(boolean_list):
        out |= 1 << ix if bit else 0
    return out
