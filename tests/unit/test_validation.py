"""
Unit tests for request validation
"""

import pytest
import os
import sys

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.append(project_root)

from picture_service.errors import ValidationError
from picture_service.validation import ROVERS, ValidationResult, validate


class TestValidate:
    """Test cases for validate()"""

    @pytest.mark.parametrize("rover", ["curiosity", "Curiosity", "OPPORTUNITY", "sPiRiT"])
    def test_valid_rover_any_casing(self, rover):
        """Rover names pass regardless of case"""
        actual = validate(rover, "2015-12-30")
        assert actual.valid
        assert actual.reason is None

    @pytest.mark.parametrize("rover", [None, ""])
    def test_missing_rover(self, rover):
        """Missing rover is reported before anything else"""
        actual = validate(rover, None)
        assert not actual.valid
        assert actual.reason == "No Rover Provided"

    def test_invalid_rover(self):
        """Unknown rover names list the valid set and the value given"""
        actual = validate("Zhurong", "2015-12-30")
        assert not actual.valid
        assert "Zhurong" in actual.reason
        for name in ROVERS:
            assert name in actual.reason

    @pytest.mark.parametrize("date", [None, ""])
    def test_missing_date(self, date):
        actual = validate("curiosity", date)
        assert not actual.valid
        assert actual.reason == "No Date Provided"

    @pytest.mark.parametrize("date", ["15-12-30", "2015/12/30", "2015-12-3", "2015-12-30 ", "2015-12-30\n", "Dec 30, 2015"])
    def test_malformed_date(self, date):
        """Dates must be exactly YYYY-MM-DD"""
        actual = validate("curiosity", date)
        assert not actual.valid
        assert "YYYY-MM-DD" in actual.reason
        assert date in actual.reason

    def test_date_shape_only(self):
        """Calendar validity is not checked"""
        assert validate("spirit", "2015-13-99").valid

    def test_rover_checked_before_date(self):
        """First failing rule wins"""
        actual = validate("Zhurong", "bad")
        assert "Invalid Rover" in actual.reason


class TestValidationResult:
    def test_reason_required_when_invalid(self):
        with pytest.raises(ValueError):
            ValidationResult(False)

    def test_reason_forbidden_when_valid(self):
        with pytest.raises(ValueError):
            ValidationResult(True, "oops")

    def test_raise_if_invalid(self):
        validate("curiosity", "2015-12-30").raise_if_invalid()
        with pytest.raises(ValidationError) as exc:
            validate(None, "2015-12-30").raise_if_invalid()
        assert exc.value.reason == "No Rover Provided"
