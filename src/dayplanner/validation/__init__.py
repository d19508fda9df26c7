"""Validation module for verifying plan correctness."""

from dayplanner.validation.validator import PlanValidator, ValidationError

__all__ = [
    "PlanValidator",
    "ValidationError",
]
