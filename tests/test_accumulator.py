"""
누적자(grand product Z, grand sum S) 테스트.

같은 multiset이면 한 바퀴 돈 뒤 초기값(1 또는 0)으로 돌아오고,
다르면 AccumulatorInconsistent를 던지는지 확인한다.
"""

import pytest

from lookup_kzg.accumulator import compute_grand_product, compute_grand_sum
from lookup_kzg.errors import AccumulatorInconsistent, ZeroElement
from lookup_kzg.evaluations import Evaluations
from lookup_kzg.field import FR


GAMMA = FR(7)

F = Evaluations([1, 2, 3, 4])
T = Evaluations([4, 1, 2, 3])

# 선택된 행만 보면 둘 다 {1, 2, 3}
SEL_F_VALUES = Evaluations([5, 1, 2, 3])
SEL_T_VALUES = Evaluations([1, 9, 2, 3])
SEL_F = Evaluations([0, 1, 1, 1])
SEL_T = Evaluations([1, 0, 1, 1])


class TestGrandProduct:

    def test_starts_at_one(self):
        z = compute_grand_product(F, T, GAMMA)
        assert z[0] == FR(1)

    def test_recurrence(self):
        z = compute_grand_product(F, T, GAMMA)
        for i in range(len(F)):
            expected = z[i] * (F[i] + GAMMA) / (T[i] + GAMMA)
            assert z[(i + 1) % len(F)] == expected

    def test_different_multisets(self):
        with pytest.raises(AccumulatorInconsistent):
            compute_grand_product(F, Evaluations([1, 2, 3, 5]), GAMMA)

    def test_same_values_different_multiplicity(self):
        with pytest.raises(AccumulatorInconsistent):
            compute_grand_product(Evaluations([1, 1, 2, 3]), Evaluations([1, 2, 2, 3]), GAMMA)

    def test_with_selectors(self):
        z = compute_grand_product(SEL_F_VALUES, SEL_T_VALUES, GAMMA, SEL_F, SEL_T)
        assert z[0] == FR(1)
        # 0번 행은 F 쪽이 선택되지 않았으므로 분자는 1
        assert z[1] == FR(1) / (SEL_T_VALUES[0] + GAMMA)

    def test_selectors_exclude_rows(self):
        # 선택자를 무시하면 multiset이 다르다
        with pytest.raises(AccumulatorInconsistent):
            compute_grand_product(SEL_F_VALUES, SEL_T_VALUES, GAMMA)

    def test_zero_denominator(self):
        with pytest.raises(ZeroElement):
            compute_grand_product(F, Evaluations([-7, 1, 2, 3]), GAMMA)


class TestGrandSum:

    def test_starts_at_zero(self):
        s = compute_grand_sum(F, T, GAMMA)
        assert s[0] == FR(0)

    def test_recurrence(self):
        s = compute_grand_sum(F, T, GAMMA)
        for i in range(len(F)):
            step = FR(1) / (F[i] + GAMMA) - FR(1) / (T[i] + GAMMA)
            assert s[(i + 1) % len(F)] == s[i] + step

    def test_different_multisets(self):
        with pytest.raises(AccumulatorInconsistent):
            compute_grand_sum(F, Evaluations([1, 2, 3, 5]), GAMMA)

    def test_with_selectors(self):
        s = compute_grand_sum(SEL_F_VALUES, SEL_T_VALUES, GAMMA, SEL_F, SEL_T)
        assert s[0] == FR(0)
        assert s[1] == -(FR(1) / (SEL_T_VALUES[0] + GAMMA))

    def test_all_zero_selectors(self):
        zeros = Evaluations.zeros(4)
        s = compute_grand_sum(F, Evaluations([9, 9, 9, 9]), GAMMA, zeros, zeros)
        assert s.is_all_zeros()

    def test_zero_denominator(self):
        with pytest.raises(ZeroElement):
            compute_grand_sum(Evaluations([-7, 1, 2, 3]), T, GAMMA)

    def test_single_row(self):
        s = compute_grand_sum(Evaluations([3]), Evaluations([3]), GAMMA)
        assert s == Evaluations([0])
