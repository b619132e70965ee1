"""Errors raised while synthesising circuits."""


class SynthesisError(Exception):
    """A precondition of a gadget is not met.

    Raised before or while constraints are emitted, e.g. when the auxiliary data for a multiplication has not
    been assigned, when the point at infinity is supplied, or when a window size is zero. The region that was
    being built must be discarded.
    """


class AssignmentError(Exception):
    """The layout layer rejected an assignment, e.g. a witness cell was assigned twice."""
