"""
Two-Stage Pledge Input Validation

DESIGN DECISION: Validation happens in two distinct stages:

STAGE 1 - SCHEMA VALIDATION:
- Required field presence
- Amount signs
- This catches empty forms and typos

STAGE 2 - SEMANTIC VALIDATION:
- Overpayment (paid more than pledged)
- Contact details that look wrong
- This catches data that is possible but suspicious

Stage 2 only runs when stage 1 passes. Warnings never block a save.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them, and the pledge entry flow refuses to save on errors.
"""

from decimal import Decimal
from typing import Optional

from wedding_ledger.models.results import ValidationIssue, ValidationResult


class PledgeValidationError(ValueError):
    """Directly entered pledge data failed validation."""

    def __init__(self, result: ValidationResult):
        self.result = result
        messages = [i.message for i in result.issues if i.severity == "error"]
        super().__init__("; ".join(messages) or "Invalid pledge")


class PledgeInputValidator:
    """Validates pledge data typed into a form or submitted publicly."""

    def _validate_schema(
        self,
        contributor_name: Optional[str],
        amount_pledged: Optional[Decimal],
        amount_paid: Decimal,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if not contributor_name or not contributor_name.strip():
            issues.append(ValidationIssue(
                field="contributor_name",
                issue_type="missing",
                message="Contributor name is required",
                severity="error",
                suggested_fix="Enter the name of the person pledging",
            ))

        if amount_pledged is None:
            issues.append(ValidationIssue(
                field="amount_pledged",
                issue_type="missing",
                message="Pledge amount is required",
                severity="error",
            ))
        elif amount_pledged <= 0:
            issues.append(ValidationIssue(
                field="amount_pledged",
                issue_type="invalid_value",
                message="Please enter a valid pledge amount",
                severity="error",
                suggested_fix="The pledge amount must be greater than zero",
            ))

        if amount_paid < 0:
            issues.append(ValidationIssue(
                field="amount_paid",
                issue_type="invalid_value",
                message="Amount paid cannot be negative",
                severity="error",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)
        return is_valid, issues

    def _validate_semantic(
        self,
        amount_pledged: Decimal,
        amount_paid: Decimal,
        email: Optional[str],
    ) -> list[ValidationIssue]:
        """Stage 2: Semantic validation. Only produces warnings."""
        issues = []

        if amount_paid > amount_pledged:
            issues.append(ValidationIssue(
                field="amount_paid",
                issue_type="suspicious_value",
                message=(
                    f"Amount paid ({amount_paid:,}) is more than "
                    f"the amount pledged ({amount_pledged:,})"
                ),
                severity="warning",
                suggested_fix="The balance will show as negative (overpaid)",
            ))

        if email and "@" not in email:
            issues.append(ValidationIssue(
                field="email",
                issue_type="suspicious_value",
                message=f"Email address looks invalid: {email}",
                severity="warning",
            ))

        return issues

    def validate(
        self,
        contributor_name: Optional[str],
        amount_pledged: Optional[Decimal],
        amount_paid: Decimal = Decimal("0"),
        email: Optional[str] = None,
    ) -> ValidationResult:
        """
        Run the two-stage pipeline.

        Returns:
            ValidationResult with all issues found
        """
        schema_valid, issues = self._validate_schema(
            contributor_name, amount_pledged, amount_paid
        )
        if schema_valid:
            issues.extend(self._validate_semantic(amount_pledged, amount_paid, email))

        return ValidationResult(is_valid=schema_valid, issues=issues)

    def validate_or_raise(self, *args, **kwargs) -> ValidationResult:
        """
        Validate and raise on errors.

        Raises:
            PledgeValidationError: If any error-level issue was found
        """
        result = self.validate(*args, **kwargs)
        if result.has_errors:
            raise PledgeValidationError(result)
        return result

    def get_user_friendly_summary(self, result: ValidationResult) -> str:
        """Summary of validation results for the person filling the form."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []
        if result.has_errors:
            lines.append("Please fix the following:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   - {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"   - {warning}")

        return "\n".join(lines)
