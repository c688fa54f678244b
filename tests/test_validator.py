"""Tests for pledge input validation."""

import pytest
from decimal import Decimal

from wedding_ledger.validation import PledgeInputValidator, PledgeValidationError


@pytest.fixture
def validator():
    return PledgeInputValidator()


class TestPledgeInputValidator:
    """Tests for the two-stage validation pipeline."""

    def test_valid_input(self, validator):
        """Test a complete pledge passes."""
        result = validator.validate("Jane", Decimal("100"), Decimal("50"), email="jane@example.com")
        assert result.is_valid is True
        assert result.issues == []
        assert validator.get_user_friendly_summary(result) == "All checks passed."

    def test_missing_name(self, validator):
        """Test a blank name is an error."""
        result = validator.validate("   ", Decimal("100"))
        assert result.is_valid is False
        assert [i.field for i in result.issues] == ["contributor_name"]

    def test_missing_amount(self, validator):
        """Test a missing pledge amount is an error."""
        result = validator.validate("Jane", None)
        assert result.has_errors is True

    def test_negative_paid(self, validator):
        """Test negative payments are errors."""
        result = validator.validate("Jane", Decimal("100"), Decimal("-1"))
        assert result.error_count == 1

    def test_overpayment_is_warning(self, validator):
        """Test paying more than pledged is allowed but flagged."""
        result = validator.validate("Jane", Decimal("100"), Decimal("150"))
        assert result.is_valid is True
        assert len(result.warnings) == 1
        assert "more than" in result.warnings[0]

    def test_semantic_stage_skipped_on_errors(self, validator):
        """Test stage 2 only runs once stage 1 passes."""
        result = validator.validate("", Decimal("100"), Decimal("150"))
        assert result.warnings == []

    def test_suspicious_email_warning(self, validator):
        """Test an email without @ is flagged."""
        result = validator.validate("Jane", Decimal("100"), email="jane.example.com")
        assert result.is_valid is True
        assert result.warnings

    def test_validate_or_raise(self, validator):
        """Test errors raise with the messages attached."""
        with pytest.raises(PledgeValidationError) as exc_info:
            validator.validate_or_raise("", Decimal("0"))
        assert "Contributor name is required" in str(exc_info.value)
        assert exc_info.value.result.error_count == 2

    def test_validation_error_is_value_error(self, validator):
        """Test callers can catch bad input as ValueError."""
        with pytest.raises(ValueError):
            validator.validate_or_raise("Jane", Decimal("-5"))

    def test_summary_lists_errors(self, validator):
        """Test the user-facing summary names the problems."""
        result = validator.validate("", Decimal("0"))
        summary = validator.get_user_friendly_summary(result)
        assert summary.startswith("Please fix the following:")
        assert "Contributor name is required" in summary
