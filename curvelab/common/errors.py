"""
Exceptions shared by the field and curve modules.
"""


class DomainError(ValueError):
    """
    Invalid mathematical input.

    Raised for misuse such as inverting zero, building a field element
    outside [0, p) through the checked constructor, or building a curve
    point that does not satisfy the curve equation.

    A missing square root is NOT a DomainError: operations that may have
    no answer (``sqrt``, ``evaluate_x``, ``lift_x``) return None instead.
    """
