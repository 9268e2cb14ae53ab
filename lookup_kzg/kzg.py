"""
KZG 다항식 커밋먼트 스킴
=========================

**커밋먼트**:
  C = p(τ)·G1 = Σᵢ cᵢ·[τⁱ]₁  (τ는 SRS의 비밀 값)

**열기 증명 (Opening Proof)**:
  "p(z) = y" 임을 증명한다.
  1. 몫 다항식 q(x) = (p(x) - y) / (x - z)
  2. 증명 π = commit(q)
  3. 검증: e(π, [τ]₂) == e(z·π + C - y·G1, [1]₂)

인자의 Round 5는 ξ에서의 일괄 열기 Wξ와 ξω에서의 단일 열기 Wξω를 만든다.
두 열기의 검증은 verifier 모듈에서 한 번의 페어링 곱으로 처리한다.

사용 예시:
    >>> C = commit(poly, srs)
    >>> pi = create_witness(poly, FR(7), srs)
"""

from lookup_kzg.field import FR, ec_mul, ec_add


def commit(poly, srs):
    """다항식을 KZG 커밋한다: C = Σ cᵢ · [τⁱ]₁.

    Raises:
        InsufficientSRS: 계수 개수가 SRS의 G1 powers보다 많을 때
    """
    bases = srs.read_g1_powers(len(poly.coeffs))

    result = None
    for base, coeff in zip(bases, poly.coeffs):
        if coeff == 0:
            continue
        result = ec_add(result, ec_mul(base, coeff))
    return result


def create_witness(poly, point, srs):
    """p(point)에 대한 열기 증명 π = commit((p(x) - p(z)) / (x - z))."""
    if not isinstance(point, FR):
        point = FR(point)
    quotient = (poly - poly.evaluate(point)).divide_by_linear_factor(point)
    return commit(quotient, srs)
