"""Mock constraint system: regions, cells, constraints and the region cursor."""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from zkecc.errors import AssignmentError

logger = logging.getLogger(__name__)

Check = Callable[[list[int]], bool]


@dataclass(frozen=True)
class Cell:
    """Position of an advice cell.

    Attributes:
        region (int): Index of the region the cell belongs to.
        column (int): Advice column.
        row (int): Row inside the region.
    """

    region: int
    column: int
    row: int


@dataclass(frozen=True)
class AssignedValue:
    """A native field element assigned to a cell. `value` is `None` when the witness is unknown."""

    cell: Cell
    value: int | None


@dataclass(frozen=True)
class AssignedCondition(AssignedValue):
    """An assigned value constrained to be either 0 or 1."""


@dataclass(frozen=True)
class Constraint:
    name: str
    region: str
    row: int
    cells: tuple[Cell, ...]
    check: Check


@dataclass(frozen=True)
class VerifyFailure:
    """A constraint that is not satisfied by the assigned witness."""

    constraint: str
    region: str
    row: int
    reason: str

    def __str__(self):
        return f"{self.constraint} in region '{self.region}' at row {self.row}: {self.reason}"


class Region:
    """A named set of rows of the constraint system.

    Regions are created by `ConstraintSystem.assign_region`. Every cell can be assigned at most once, and the
    constraints are evaluated lazily by `ConstraintSystem.verify`.
    """

    def __init__(self, cs: "ConstraintSystem", index: int, name: str):
        self.cs = cs
        self.index = index
        self.name = name

    def assign_advice(self, column: int, row: int, value: int | None) -> AssignedValue:
        """Assign `value` to the advice cell at (`column`, `row`).

        Raises:
            AssignmentError: If the cell was already assigned.
        """
        if column < 0 or row < 0:
            msg = f"Invalid cell position: column: {column}, row: {row}"
            raise AssignmentError(msg)
        cell = Cell(self.index, column, row)
        if cell in self.cs.witness:
            msg = f"Cell already assigned in region '{self.name}': column: {column}, row: {row}"
            raise AssignmentError(msg)
        if value is not None:
            value %= self.cs.native_modulus
        self.cs.witness[cell] = value
        return AssignedValue(cell, value)

    def constrain(self, name: str, row: int, cells: Sequence[Cell], check: Check):
        """Record the constraint `check(values of cells)`."""
        self.cs.constraints.append(Constraint(name, self.name, row, tuple(cells), check))


@dataclass
class ConstraintSystem:
    """Witness table and constraint list of one circuit instance.

    Stands in for a mock prover: assignments are stored, every gadget records the relation its cells must
    satisfy, and `verify` reports every relation that does not hold.

    Attributes:
        native_modulus (int): The characteristic of the native field of the circuit.
        instance (list[int]): The public inputs.
    """

    native_modulus: int
    instance: list[int] = field(default_factory=list)
    witness: dict[Cell, int | None] = field(default_factory=dict, init=False, repr=False)
    constraints: list[Constraint] = field(default_factory=list, init=False, repr=False)
    regions: list[Region] = field(default_factory=list, init=False, repr=False)

    def assign_region(self, name: str) -> Region:
        """Open a new region named `name`."""
        region = Region(self, len(self.regions), name)
        self.regions.append(region)
        logger.debug("Opened region %d: %s", region.index, name)
        return region

    def constrain_instance(self, assigned: AssignedValue, row: int):
        """Bind the cell of `assigned` to the public input at `row`."""
        instance = self.instance

        def check(values: list[int]) -> bool:
            return row < len(instance) and values[0] == instance[row] % self.native_modulus

        self.constraints.append(Constraint(f"instance[{row}]", "instance", row, (assigned.cell,), check))

    def verify(self) -> list[VerifyFailure]:
        """Evaluate every constraint on the witness.

        Returns:
            The list of failures. An empty list means the witness satisfies the constraint system.
        """
        failures = []
        for constraint in self.constraints:
            values = [self.witness.get(cell) for cell in constraint.cells]
            if any(value is None for value in values):
                failures.append(VerifyFailure(constraint.name, constraint.region, constraint.row, "unknown witness"))
            elif not constraint.check(values):
                failures.append(VerifyFailure(constraint.name, constraint.region, constraint.row, "not satisfied"))
        logger.debug("Verified %d constraints, %d failures", len(self.constraints), len(failures))
        return failures

    def statistics(self) -> dict[str, int]:
        """Return the number of regions, cells, rows and constraints."""
        rows = {(cell.region, cell.row) for cell in self.witness}
        return {
            "regions": len(self.regions),
            "cells": len(self.witness),
            "rows": len(rows),
            "constraints": len(self.constraints),
        }


class RegionCtx:
    """A region together with the cursor pointing at its next free row.

    Every gadget receives the context, assigns its cells at `offset` and advances it with `next`. Operations
    on the same region must therefore run in a fixed order.
    """

    def __init__(self, region: Region, offset: int = 0):
        self.region = region
        self.offset = offset

    def assign_advice(self, column: int, value: int | None) -> AssignedValue:
        return self.region.assign_advice(column, self.offset, value)

    def constrain(self, name: str, cells: Sequence[Cell], check: Check):
        self.region.constrain(name, self.offset, cells, check)

    def next(self):
        self.offset += 1
