"""
tests/test_fixed.py - Unit tests for midimorph/core/fixed.py

Covers:
    - FixedPoint construction, coercion and sign normalisation
    - Exact addition/subtraction across signs
    - Multiplication sign propagation and rounding
    - Ordering, hashing and integer conversion
    - SignedInt
"""

from __future__ import annotations

from fractions import Fraction

import pytest

from midimorph.core.errors import InvalidArgumentError
from midimorph.core.fixed import ONE, ZERO, FixedPoint, SignedInt, as_int

# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------


class TestConstruction:
    def test_from_int_scales_by_one(self) -> None:
        assert FixedPoint.from_int(3).raw == 3 * ONE

    def test_negative_zero_is_normalised(self) -> None:
        value = FixedPoint(0, True)
        assert value.negative is False
        assert value == ZERO

    def test_negative_magnitude_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            FixedPoint(-1)

    def test_from_ratio_half(self) -> None:
        assert FixedPoint.from_ratio(1, 2).raw == ONE // 2

    def test_from_ratio_negative_denominator(self) -> None:
        assert FixedPoint.from_ratio(3, -2) == FixedPoint.from_ratio(-3, 2)

    def test_from_ratio_zero_denominator(self) -> None:
        with pytest.raises(InvalidArgumentError):
            FixedPoint.from_ratio(1, 0)

    def test_from_float_exact_binary_fraction(self) -> None:
        assert FixedPoint.from_float(0.25).raw == ONE // 4

    def test_coerce_fraction(self) -> None:
        assert FixedPoint.coerce(Fraction(3, 4)) == FixedPoint.from_ratio(3, 4)

    def test_coerce_signed_int(self) -> None:
        assert FixedPoint.coerce(SignedInt(2, True)) == FixedPoint.from_int(-2)

    def test_coerce_passes_fixed_point_through(self) -> None:
        value = FixedPoint.from_int(7)
        assert FixedPoint.coerce(value) is value

    def test_coerce_rejects_bool(self) -> None:
        with pytest.raises(InvalidArgumentError):
            FixedPoint.coerce(True)

    def test_coerce_rejects_nan(self) -> None:
        with pytest.raises(InvalidArgumentError):
            FixedPoint.coerce(float("nan"))

    def test_coerce_rejects_string(self) -> None:
        with pytest.raises(InvalidArgumentError):
            FixedPoint.coerce("12")


# ---------------------------------------------------------------------------
# Arithmetic
# ---------------------------------------------------------------------------


class TestArithmetic:
    def test_add_same_sign(self) -> None:
        assert FixedPoint.from_int(2) + FixedPoint.from_int(3) == 5

    def test_add_opposite_signs_negative_result(self) -> None:
        result = FixedPoint.from_int(2) + FixedPoint.from_int(-5)
        assert result == FixedPoint.from_int(-3)
        assert result.negative

    def test_add_opposite_signs_to_zero(self) -> None:
        result = FixedPoint.from_int(4) + FixedPoint.from_int(-4)
        assert result == ZERO
        assert not result.negative

    def test_sub(self) -> None:
        assert FixedPoint.from_int(1) - FixedPoint.from_int(3) == -2

    def test_rsub_with_int(self) -> None:
        assert 10 - FixedPoint.from_int(3) == 7

    def test_add_int(self) -> None:
        assert FixedPoint.from_ratio(1, 2) + 1 == FixedPoint.from_ratio(3, 2)

    def test_mul_negative_by_positive(self) -> None:
        assert FixedPoint.from_int(-2) * FixedPoint.from_int(3) == -6

    def test_mul_two_negatives(self) -> None:
        result = FixedPoint.from_int(-2) * FixedPoint.from_int(-3)
        assert result == 6
        assert not result.negative

    def test_mul_fraction_exact(self) -> None:
        assert FixedPoint.from_ratio(1, 2) * 3 == FixedPoint.from_ratio(3, 2)

    def test_mul_by_one_is_identity(self) -> None:
        value = FixedPoint.from_ratio(12345, 7)
        assert value * 1 == value

    def test_mul_rounds_below_resolution(self) -> None:
        # 1 raw step * 0.5 rounds half away from zero back to 1 step
        tiny = FixedPoint(1)
        assert (tiny * FixedPoint.from_ratio(1, 2)).magnitude == 1

    def test_neg_and_abs(self) -> None:
        value = FixedPoint.from_int(5)
        assert -value == -5
        assert abs(-value) == value

    def test_scale_div(self) -> None:
        assert FixedPoint.from_int(3).scale_div(2) == FixedPoint.from_ratio(3, 2)

    def test_scale_div_by_zero(self) -> None:
        with pytest.raises(InvalidArgumentError):
            FixedPoint.from_int(3).scale_div(0)


# ---------------------------------------------------------------------------
# Comparison and conversion
# ---------------------------------------------------------------------------


class TestComparison:
    def test_ordering_across_signs(self) -> None:
        assert FixedPoint.from_int(-1) < ZERO < FixedPoint.from_ratio(1, 3)

    def test_sorting(self) -> None:
        low, high = FixedPoint.from_int(-2), FixedPoint.from_int(3)
        assert sorted([high, low, ZERO]) == [low, ZERO, high]

    def test_equal_values_hash_equal(self) -> None:
        assert hash(FixedPoint.from_int(2)) == hash(FixedPoint.coerce(2))

    def test_hash_matches_equal_int_and_fraction(self) -> None:
        assert hash(FixedPoint.from_int(1)) == hash(1)
        assert hash(FixedPoint.from_int(-3)) == hash(-3)
        assert hash(FixedPoint.from_ratio(1, 2)) == hash(Fraction(1, 2))

    def test_mixes_with_ints_in_sets_and_dicts(self) -> None:
        assert FixedPoint.from_int(480) in {480}
        assert {0: "start"}[FixedPoint.zero()] == "start"

    def test_int_truncates_toward_zero(self) -> None:
        assert int(FixedPoint.from_ratio(-7, 2)) == -3
        assert int(FixedPoint.from_ratio(7, 2)) == 3

    def test_round_ticks_half_up(self) -> None:
        assert FixedPoint.from_ratio(5, 2).round_ticks() == 3
        assert FixedPoint.from_ratio(-5, 2).round_ticks() == -2

    def test_to_fraction(self) -> None:
        assert FixedPoint.from_ratio(3, 4).to_fraction() == Fraction(3, 4)

    def test_to_float(self) -> None:
        assert FixedPoint.from_ratio(-1, 4).to_float() == -0.25


# ---------------------------------------------------------------------------
# SignedInt
# ---------------------------------------------------------------------------


class TestSignedInt:
    def test_int_value(self) -> None:
        assert int(SignedInt(3, True)) == -3

    def test_from_int(self) -> None:
        value = SignedInt.from_int(-4)
        assert value.magnitude == 4
        assert value.negative

    def test_negative_zero_normalised(self) -> None:
        assert SignedInt(0, True).negative is False

    def test_negative_magnitude_rejected(self) -> None:
        with pytest.raises(InvalidArgumentError):
            SignedInt(-1)

    def test_as_int_accepts_both(self) -> None:
        assert as_int(SignedInt(2, True)) == -2
        assert as_int(5) == 5

    def test_as_int_rejects_float(self) -> None:
        with pytest.raises(InvalidArgumentError):
            as_int(1.5)
