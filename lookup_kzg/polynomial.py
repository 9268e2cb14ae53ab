"""
계수 표현 다항식과 radix-2 FFT
==============================

Prover 라운드가 다루는 다항식은 모두 여기의 Polynomial이다.

  Polynomial                 [c₀, c₁, ...] 계수 리스트. 연산은 항상 새 객체를 만든다.
  fft / ifft                 도메인 {ω^i} 위의 값 ↔ 계수 (재귀 Cooley-Tukey)
  divide_by_vanishing(n)     C(x) / (x^n - 1). 몫 Q 계산용
  divide_by_linear_factor(a) p(x) / (x - a). KZG 열기 증명용
  lagrange_first(n)          L₁(x). 크기별로 캐시된다

    >>> p = Polynomial([1, 2, 3])   # 3x² + 2x + 1
    >>> p.evaluate(2) == FR(17)
    True
"""

import functools

from lookup_kzg.errors import NonZeroRemainder
from lookup_kzg.field import FR, get_root_of_unity
from lookup_kzg.utils import next_power_of_2


# 이 길이 이상의 다항식끼리 곱할 때는 FFT 곱셈을 사용한다
FFT_MUL_THRESHOLD = 32


# ─────────────────────────────────────────────────────────────────────
# Polynomial
# ─────────────────────────────────────────────────────────────────────

class Polynomial:
    """FR 계수 다항식. coeffs[i]가 xⁱ의 계수이다.

    열 f, t, 선택자, 누적자 Z 또는 S, 몫 Q가 모두 이 형태로 만들어진다.
    최고차 0 계수는 생성할 때 잘라내므로 coeffs == 비교가 곧 다항식 비교이다.

    주의:
        FR이 왼쪽에 오는 FR * Polynomial은 py_ecc가 TypeError를 낸다.
        스칼라는 항상 오른쪽에 둔다: p * beta.

        >>> Polynomial([1, 2]) * Polynomial([3, 4]) == Polynomial([3, 10, 8])
        True
    """

    def __init__(self, coeffs=None):
        coeffs = [c if isinstance(c, FR) else FR(c) for c in (coeffs or ())]
        while len(coeffs) > 1 and coeffs[-1] == 0:
            coeffs.pop()
        self.coeffs = coeffs or [FR(0)]

    @property
    def degree(self):
        """len(coeffs) - 1. 영 다항식은 0."""
        return len(self.coeffs) - 1

    def is_zero(self):
        return self.degree == 0 and self.coeffs[0] == 0

    def evaluate(self, point):
        """p(point), Horner 전개."""
        x = point if isinstance(point, FR) else FR(point)
        acc = FR(0)
        for c in self.coeffs[::-1]:
            acc = acc * x + c
        return acc

    # ── 산술 ──

    def __add__(self, other):
        if isinstance(other, (int, FR)):
            return Polynomial([self.coeffs[0] + other] + self.coeffs[1:])
        a, b = self.coeffs, other.coeffs
        if len(a) < len(b):
            a, b = b, a
        return Polynomial([c + b[i] if i < len(b) else c for i, c in enumerate(a)])

    __radd__ = __add__

    def __sub__(self, other):
        return self + (-other)

    def __rsub__(self, other):
        return -self + other

    def __neg__(self):
        return Polynomial([-c for c in self.coeffs])

    def __mul__(self, other):
        """스칼라곱이면 계수별 곱, 다항식끼리는 길이에 따라 합성곱 또는 FFT."""
        if isinstance(other, (int, FR)):
            k = other if isinstance(other, FR) else FR(other)
            return Polynomial([c * k for c in self.coeffs])
        if min(len(self.coeffs), len(other.coeffs)) >= FFT_MUL_THRESHOLD:
            return Polynomial(_mul_fft(self.coeffs, other.coeffs))
        return Polynomial(_mul_naive(self.coeffs, other.coeffs))

    __rmul__ = __mul__

    def __eq__(self, other):
        if isinstance(other, (int, FR)):
            other = Polynomial([other])
        return isinstance(other, Polynomial) and self.coeffs == other.coeffs

    def __repr__(self):
        terms = [
            str(int(c)) if i == 0 else f"{int(c)}*x" if i == 1 else f"{int(c)}*x^{i}"
            for i, c in enumerate(self.coeffs) if c != 0
        ]
        return f"Polynomial({' + '.join(terms) or '0'})"

    # ── 도메인 ──

    def shift_by_generator(self, omega):
        """p(ωx)를 반환한다.

        계수 cᵢ에 ωⁱ를 곱하면 된다. 누적자의 "다음 행" Z(ωx), S(ωx)를
        만드는 데 사용한다.
        """
        result = []
        omega_i = FR(1)
        for c in self.coeffs:
            result.append(c * omega_i)
            omega_i = omega_i * omega
        return Polynomial(result)

    def divide_by_vanishing(self, n):
        """Z_H(x) = x^n - 1로 나눈 몫을 반환한다.

        C(x) = Q(x)·(x^n - 1)이면 cⱼ = q_{j-n} - qⱼ 이므로
        최고차부터 내려오며 계수를 n칸 아래로 넘긴다.

        Raises:
            NonZeroRemainder: 나머지가 0이 아닌 경우 (제약 불만족)
        """
        remainder = list(self.coeffs)
        if len(remainder) <= n:
            if all(c == 0 for c in remainder):
                return Polynomial.zero()
            raise NonZeroRemainder("x^n - 1로 나누어 떨어지지 않습니다")

        quotient = [FR(0)] * (len(remainder) - n)
        for i in range(len(remainder) - 1, n - 1, -1):
            coeff = remainder[i]
            quotient[i - n] = coeff
            remainder[i - n] = remainder[i - n] + coeff
            remainder[i] = FR(0)

        for c in remainder[:n]:
            if c != 0:
                raise NonZeroRemainder("x^n - 1로 나누어 떨어지지 않습니다")
        return Polynomial(quotient)

    def divide_by_linear_factor(self, a):
        """(x - a)로 나눈 몫을 반환한다 (조립제법, synthetic division).

        KZG 열기 증명 W(x) = (p(x) - p(a)) / (x - a) 계산에 사용한다.
        호출자가 먼저 p(a)를 빼므로 항상 나누어 떨어져야 한다.

        Raises:
            NonZeroRemainder: p(a) ≠ 0 인 경우
        """
        if not isinstance(a, FR):
            a = FR(a)
        coeffs = self.coeffs
        if len(coeffs) == 1:
            if coeffs[0] != 0:
                raise NonZeroRemainder("x - a로 나누어 떨어지지 않습니다")
            return Polynomial.zero()

        quotient = [FR(0)] * (len(coeffs) - 1)
        carry = FR(0)
        for i in range(len(coeffs) - 1, 0, -1):
            carry = coeffs[i] + carry * a
            quotient[i - 1] = carry
        if coeffs[0] + carry * a != 0:
            raise NonZeroRemainder("x - a로 나누어 떨어지지 않습니다")
        return Polynomial(quotient)

    # ── 생성 ──

    @classmethod
    def zero(cls):
        return cls()

    @classmethod
    def one(cls):
        return cls([1])

    @classmethod
    def vanishing(cls, n):
        """Z_H(x) = x^n - 1."""
        return cls([-1] + [0] * (n - 1) + [1])

    @classmethod
    def from_evaluations(cls, evals, omega):
        """{ω^i} 위의 값 벡터를 IFFT로 보간한다."""
        return cls(ifft(list(evals), omega))


@functools.lru_cache(maxsize=None)
def lagrange_first(n):
    """L₁(x) = (x^n - 1) / (n·(x - 1)).

    전개하면 계수가 모두 1/n인 n-1차 다항식이다.
    """
    return Polynomial([FR(1) / FR(n)] * n)


# ─────────────────────────────────────────────────────────────────────
# FFT
# ─────────────────────────────────────────────────────────────────────

def fft(coeffs, omega):
    """[p(ω^0), p(ω^1), ..., p(ω^(n-1))].

    짝수/홀수 차수 계수로 나눠 ω²로 재귀한 뒤 합친다:
        p(ωᵏ)       = e(ω²ᵏ) + ωᵏ·o(ω²ᵏ)
        p(ωᵏ⁺ⁿᐟ²)   = e(ω²ᵏ) - ωᵏ·o(ω²ᵏ)

    Args:
        coeffs: 길이 n (2의 거듭제곱)
        omega: 원시 n차 단위근
    """
    n = len(coeffs)
    if n == 1:
        c = coeffs[0]
        return [c if isinstance(c, FR) else FR(c)]

    sq = omega * omega
    evens, odds = fft(coeffs[::2], sq), fft(coeffs[1::2], sq)
    lo, hi = [], []
    w = FR(1)
    for e, o in zip(evens, odds):
        wo = w * o
        lo.append(e + wo)
        hi.append(e - wo)
        w = w * omega
    return lo + hi


def ifft(evals, omega):
    """fft의 역변환: ω⁻¹로 변환하고 1/n을 곱한다."""
    inv_n = FR(1) / FR(len(evals))
    return [c * inv_n for c in fft(evals, FR(1) / omega)]


def _mul_naive(a, b):
    out = [FR(0)] * (len(a) + len(b) - 1)
    for i, x in enumerate(a):
        if x == 0:
            continue
        for j, y in enumerate(b):
            out[i + j] = out[i + j] + x * y
    return out


def _mul_fft(a, b):
    """a·b 계수를 크기 2^k ≥ deg+1 도메인에서의 점별 곱으로 구한다."""
    size = next_power_of_2(len(a) + len(b) - 1)
    omega = get_root_of_unity(size)
    a_vals = fft(list(a) + [FR(0)] * (size - len(a)), omega)
    b_vals = fft(list(b) + [FR(0)] * (size - len(b)), omega)
    return ifft([x * y for x, y in zip(a_vals, b_vals)], omega)
