import pytest

from src.hrms_payroll.hrms_payroll.common.validators import require_int
from src.hrms_payroll.hrms_payroll.core.exceptions import ValidationError


@pytest.mark.parametrize("value, expected", [(3, 3), ("12", 12), (2024.0, 2024)])
def test_require_int_accepts_whole_numbers(value, expected):
    assert require_int(value, "month") == expected


@pytest.mark.parametrize("value", [3.7, True, False, None, "3.5", "abc", float("nan")])
def test_require_int_rejects_everything_else(value):
    with pytest.raises(ValidationError, match="month must be an integer"):
        require_int(value, "month")
