"""Validation package."""

from wedding_ledger.validation.validator import PledgeInputValidator, PledgeValidationError

__all__ = ["PledgeInputValidator", "PledgeValidationError"]
