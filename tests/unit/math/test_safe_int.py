"""Tests for SafeInt checked arithmetic wrapper."""

import pytest

from launchpad.safe_int import (
    UINT256_MAX,
    DivisionByZero,
    S,
    SafeInt,
    SafeIntError,
    Uint256Overflow,
    Underflow,
)


class TestSafeIntConstruction:
    """Tests for SafeInt construction."""

    def test_from_int(self):
        """SafeInt can be constructed from int."""
        assert SafeInt(42).value == 42

    def test_from_safeint(self):
        """SafeInt can be constructed from another SafeInt."""
        assert SafeInt(SafeInt(42)).value == 42

    def test_from_negative(self):
        """SafeInt can hold negative values (validated on conversion)."""
        assert SafeInt(-10).value == -10

    def test_from_invalid_type_raises(self):
        """SafeInt rejects invalid types."""
        with pytest.raises(TypeError):
            SafeInt("42")  # type: ignore
        with pytest.raises(TypeError):
            SafeInt(3.14)  # type: ignore

    def test_from_bool_raises(self):
        """Booleans are not amounts."""
        with pytest.raises(TypeError):
            SafeInt(True)  # type: ignore

    def test_alias_s(self):
        """S is an alias for SafeInt."""
        assert S is SafeInt


class TestSafeIntArithmetic:
    """Tests for checked operators."""

    def test_add_and_radd(self):
        """Addition works with SafeInt and int on either side."""
        assert (S(2) + 3).value == 5
        assert (3 + S(2)).value == 5
        assert (S(2) + S(3)).value == 5

    def test_sub(self):
        """Subtraction to zero is allowed."""
        assert (S(5) - 5).value == 0

    def test_sub_underflow_raises(self):
        """Subtraction below zero raises Underflow."""
        with pytest.raises(Underflow):
            S(1) - 2
        with pytest.raises(Underflow):
            1 - S(2)

    def test_mul_is_unbounded(self):
        """Multiplication beyond uint256 is fine until conversion."""
        result = S(UINT256_MAX) * 2
        assert result.value == UINT256_MAX * 2

    def test_floordiv(self):
        """Floor division rounds down."""
        assert (S(7) // 2).value == 3
        assert (7 // S(2)).value == 3

    def test_floordiv_by_zero_raises(self):
        """Division by zero raises DivisionByZero."""
        with pytest.raises(DivisionByZero):
            S(7) // 0
        with pytest.raises(DivisionByZero):
            7 // S(0)

    def test_mul_div(self):
        """mul_div floors the scaled product."""
        # 1 ether at 1% fee
        assert S(10**18).mul_div(100, 10_000).value == 10**16
        assert S(999).mul_div(100, 10_000).value == 9

    def test_mul_div_zero_denominator_raises(self):
        """mul_div with a zero denominator raises."""
        with pytest.raises(DivisionByZero):
            S(10).mul_div(1, 0)

    def test_errors_share_base(self):
        """All SafeInt errors are ArithmeticErrors."""
        for error in (DivisionByZero, Underflow, Uint256Overflow):
            assert issubclass(error, SafeIntError)
            assert issubclass(error, ArithmeticError)


class TestSafeIntComparison:
    """Tests for comparison and conversion."""

    def test_comparisons(self):
        """SafeInt compares against SafeInt and int."""
        assert S(1) < 2
        assert S(2) <= S(2)
        assert S(3) > 2
        assert S(3) >= S(3)
        assert S(3) == 3
        assert S(3) == S(3)

    def test_bool(self):
        """Zero is falsy."""
        assert not S(0)
        assert S(1)

    def test_int(self):
        """int() unwraps the value."""
        assert int(S(12)) == 12


class TestUint256Conversion:
    """Tests for to_uint256 bounds."""

    def test_in_range(self):
        """Values in range are returned as int."""
        assert S(UINT256_MAX).to_uint256() == UINT256_MAX
        assert S(0).to_uint256() == 0

    def test_overflow_raises(self):
        """Values above 2^256-1 raise."""
        with pytest.raises(Uint256Overflow):
            S(UINT256_MAX + 1).to_uint256()

    def test_negative_raises(self):
        """Negative values raise."""
        with pytest.raises(Uint256Overflow):
            S(-1).to_uint256()
