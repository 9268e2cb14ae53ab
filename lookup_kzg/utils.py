"""
공유 유틸리티
=============

Prover와 Verifier가 함께 사용하는 스칼라 수준의 도구.

**주요 기능**:
  - evaluate_zh: 소거 다항식 Z_H(x) = x^n - 1 평가 (n = 2^bits)
  - evaluate_l1: 첫 번째 Lagrange 기저 L₁(x) 평가
  - batch_inverse: Montgomery 트릭으로 여러 원소의 역원을 한 번에 계산
  - log2_exact / next_power_of_2: 도메인 크기 계산
"""

from lookup_kzg.errors import InvalidInput, ZeroElement
from lookup_kzg.field import FR


def evaluate_zh(x, bits):
    """Z_H(x) = x^(2^bits) - 1 을 bits번의 제곱으로 계산한다."""
    if not isinstance(x, FR):
        x = FR(x)
    for _ in range(bits):
        x = x * x
    return x - FR(1)


def evaluate_l1(x, zhx, bits):
    """L₁(x) = Z_H(x) / (n·(x - 1)) 을 평가한다.

    Verifier는 Z_H(ξ)를 이미 계산해 두므로 인자로 받는다.

    Args:
        x: 평가 점 (도메인 밖의 점)
        zhx: Z_H(x)
        bits: log₂(n)
    """
    if not isinstance(x, FR):
        x = FR(x)
    n = FR(1 << bits)
    return zhx / (n * (x - FR(1)))


def batch_inverse(values):
    """모든 원소의 역원을 한 번의 나눗셈으로 계산한다 (Montgomery 트릭).

    prefix[i] = v₀·v₁·...·vᵢ 를 만든 뒤 전체 곱의 역원 하나로부터
    거꾸로 내려오며 각 역원을 복원한다.

    Args:
        values: FR 원소 리스트

    Returns:
        list[FR]: [1/v₀, 1/v₁, ...]

    Raises:
        ZeroElement: 0이 포함되어 있는 경우
    """
    n = len(values)
    if n == 0:
        return []

    prefix = [FR(0)] * n
    acc = FR(1)
    for i, v in enumerate(values):
        if v == 0:
            raise ZeroElement(f"{i}번째 원소가 0이므로 역원이 없습니다")
        acc = acc * v
        prefix[i] = acc

    inv = FR(1) / acc
    result = [FR(0)] * n
    for i in range(n - 1, 0, -1):
        result[i] = inv * prefix[i - 1]
        inv = inv * values[i]
    result[0] = inv
    return result


def is_power_of_2(n):
    """n이 1, 2, 4, 8, ... 중 하나인지 확인한다.

    Args:
        n: 정수 (0과 음수는 False)

    예시:
        >>> is_power_of_2(8), is_power_of_2(6), is_power_of_2(0)
        (True, False, False)
    """
    return n >= 1 and (n & (n - 1)) == 0


def log2_exact(n):
    """n = 2^k 인 k를 반환한다.

    Raises:
        InvalidInput: n이 2의 거듭제곱이 아닌 경우
    """
    if not is_power_of_2(n):
        raise InvalidInput(f"길이는 2의 거듭제곱이어야 합니다: {n}")
    return n.bit_length() - 1


def next_power_of_2(n):
    """n 이상의 가장 작은 2의 거듭제곱.

    예시:
        >>> next_power_of_2(3)  # 4
        >>> next_power_of_2(4)  # 4
    """
    if n <= 1:
        return 1
    p = 1
    while p < n:
        p <<= 1
    return p
