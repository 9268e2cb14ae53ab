"""
평가 표현(Evaluation form) 벡터
===============================

도메인 H = {1, ω, ..., ω^(n-1)} 위의 평가값 벡터를 다룬다.
F, T, 선택자 벡터와 누적자 Z, S는 모두 이 형태로 만들어진 뒤
IFFT로 계수 표현 Polynomial이 된다.
"""

from lookup_kzg.field import FR, get_root_of_unity
from lookup_kzg.polynomial import Polynomial, fft
from lookup_kzg.utils import log2_exact


class Evaluations:
    """길이 n(2의 거듭제곱)의 FR 평가값 벡터.

    values[i] = p(ωⁱ)

    예시:
        >>> e = Evaluations([1, 2, 3, 4])
        >>> e.shift_by_generator().values  # [2, 3, 4, 1]
        >>> e.to_polynomial().evaluate(FR(1))  # FR(1)
    """

    def __init__(self, values):
        self.values = [v if isinstance(v, FR) else FR(v) for v in values]

    @classmethod
    def ones(cls, n):
        return cls([FR(1)] * n)

    @classmethod
    def zeros(cls, n):
        return cls([FR(0)] * n)

    @classmethod
    def from_polynomial(cls, poly, n, extension=1):
        """다항식을 n·extension개의 단위근 위에서 평가한다 (FFT).

        extension > 1이면 차수가 n 이상인 다항식(예: 제약 다항식)도
        그대로 표현할 수 있는 확장 도메인을 사용한다.
        도메인보다 차수가 크면 x^size = 1을 이용해 계수를 접는다.
        """
        size = n * extension
        folded = [FR(0)] * size
        for i, c in enumerate(poly.coeffs):
            folded[i % size] = folded[i % size] + c
        return cls(fft(folded, get_root_of_unity(size)))

    def to_polynomial(self):
        """평가값을 보간하는 (n-1)차 이하 다항식 (IFFT)."""
        log2_exact(len(self.values))
        return Polynomial.from_evaluations(self.values, get_root_of_unity(len(self.values)))

    def shift_by_generator(self):
        """"다음 행" 벡터: 결과의 i번째 값은 values[(i+1) % n]."""
        return Evaluations(self.values[1:] + self.values[:1])

    def is_all_ones(self):
        return all(v == 1 for v in self.values)

    def is_all_zeros(self):
        return all(v == 0 for v in self.values)

    def is_boolean(self):
        return all(v == 0 or v == 1 for v in self.values)

    def __len__(self):
        return len(self.values)

    def __getitem__(self, i):
        return self.values[i]

    def __iter__(self):
        return iter(self.values)

    def __eq__(self, other):
        if not isinstance(other, Evaluations):
            return False
        return self.values == other.values

    def __repr__(self):
        return f"Evaluations({[int(v) for v in self.values]})"
