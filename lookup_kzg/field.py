"""
bn128 스칼라 필드와 곡선 연산
=============================

커밋먼트, 누적자, 검증식이 공유하는 대수 도구를 한곳에 모은다.

  FR        r ≈ 2^254 크기의 소수체. r - 1이 2^28로 나누어떨어지므로
            2^28 이하의 2-거듭제곱 크기 도메인을 만들 수 있다.
  G1 / G2   py_ecc bn128 점. 항등원(무한원점)은 None.
  ω         크기 n 도메인 {1, ω, ..., ω^(n-1)}의 생성원.

    >>> from lookup_kzg.field import FR, G1, ec_mul
    >>> FR(6) * FR(7) == FR(42)
    True
    >>> ec_mul(G1, 0) is None
    True
"""

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128


# ─────────────────────────────────────────────────────────────────────
# 스칼라 필드
# ─────────────────────────────────────────────────────────────────────

class FR(FQ):
    """mod r 정수. 연산자는 py_ecc FQ에서 물려받는다.

    주의:
        py_ecc는 0의 역원을 0으로 돌려준다. 0으로 나누는 경우는
        호출하는 쪽(utils.batch_inverse 등)에서 직접 검사해야 한다.
    """
    field_modulus = bn128.curve_order


# r
CURVE_ORDER = bn128.curve_order

# q: G1 좌표는 [0, q) 범위
FIELD_MODULUS = bn128.field_modulus

# r - 1 = 2^28 · (홀수): 지원하는 도메인 크기의 상한 2^MAX_DOMAIN_BITS
MAX_DOMAIN_BITS = 28


# ─────────────────────────────────────────────────────────────────────
# 곡선 점
# ─────────────────────────────────────────────────────────────────────

G1 = bn128.G1
G2 = bn128.G2


def ec_mul(point, scalar):
    """[k]P. scalar는 int와 FR 모두 받으며 r로 줄여서 곱한다."""
    # bn128.double은 무한원점을 처리하지 않는다
    if point is None:
        return None
    k = int(scalar) if isinstance(scalar, FR) else scalar
    return bn128.multiply(point, k % CURVE_ORDER)


def ec_add(p1, p2):
    """타원곡선 점 덧셈 p1 + p2.

    Args:
        p1, p2: 같은 그룹(G1 또는 G2)의 점. None은 항등원

    Returns:
        p1 + p2. 한쪽이 None이면 다른 쪽을 그대로 돌려준다.

    예시:
        >>> ec_add(G1, None) == G1
        True
    """
    return bn128.add(p1, p2)


def ec_neg(point):
    """점의 덧셈 역원 -point = (x, -y).

    Args:
        point: G1 또는 G2 위의 점 (None 허용)

    Returns:
        -point. ec_add(point, ec_neg(point))는 None이다.
    """
    return bn128.neg(point)


def ec_pairing(g2_point, g1_point):
    """쌍선형 페어링 e(G1, G2) → GT.

    주의:
        py_ecc.bn128.pairing의 인자 순서는 (G2, G1)이다.
    """
    return bn128.pairing(g2_point, g1_point)


def pairing_product_equals(a1, a2, b1, b2):
    """e(a1, a2) · e(b1, b2) == 1 인지 확인한다.

    KZG 일괄 열기 검증의 마지막 단계에서 사용된다:
        e(-[A]₁, [τ]₂) · e([B]₁, [1]₂) = 1

    Args:
        a1, b1: G1 위의 점
        a2, b2: G2 위의 점

    Returns:
        bool: 페어링 곱이 GT의 항등원이면 True
    """
    product = ec_pairing(a2, a1) * ec_pairing(b2, b1)
    return product == bn128.FQ12.one()


# ─────────────────────────────────────────────────────────────────────
# 원소 검증 (Verifier 입력 확인용)
# ─────────────────────────────────────────────────────────────────────

def is_field_element(value):
    """value가 FR의 정규(canonical) 원소인지 확인한다.

    역직렬화된 값 중 r 이상인 정수는 FR로 감싸지 않고 int로 남겨두므로
    여기서 걸러진다.
    """
    if isinstance(value, FR):
        return 0 <= value.n < CURVE_ORDER
    return False


def is_g1_point(point):
    """point가 bn128 G1 위의 점(무한원점 포함)인지 확인한다.

    bn128 G1의 cofactor는 1이므로 곡선 위에 있으면 곧 부분군의 원소이다.
    """
    if point is None:
        return True
    if not isinstance(point, tuple) or len(point) != 2:
        return False
    x, y = point
    # FR도 bn128.FQ의 하위 클래스이므로 정확한 타입을 비교한다
    if type(x) is not bn128.FQ or type(y) is not bn128.FQ:
        return False
    if not (0 <= x.n < FIELD_MODULUS and 0 <= y.n < FIELD_MODULUS):
        return False
    return bn128.is_on_curve(point, bn128.b)


# ─────────────────────────────────────────────────────────────────────
# 평가 도메인
# ─────────────────────────────────────────────────────────────────────

def get_root_of_unity(n):
    """위수가 정확히 n인 ω.

    FR(5)는 FR*의 이차 비잉여(quadratic non-residue)이므로
    ω = 5^((r-1)/n)은 정확히 위수 n을 가진다.

    Args:
        n: 도메인 크기. 2^28 이하의 2의 거듭제곱

    Returns:
        FR: 원시 n차 단위근

    Raises:
        ValueError: 지원하지 않는 n
    """
    if n < 1 or (n & (n - 1)) != 0:
        raise ValueError(f"도메인 크기 {n}: 2의 거듭제곱이 아님")
    if n > (1 << MAX_DOMAIN_BITS):
        raise ValueError(f"도메인 크기 {n}: 2^28 초과")
    if n == 1:
        return FR(1)
    return FR(5) ** ((CURVE_ORDER - 1) // n)


def get_roots_of_unity(n):
    """[ω^0, ω^1, ..., ω^(n-1)]."""
    omega = get_root_of_unity(n)
    domain = [FR(1)]
    while len(domain) < n:
        domain.append(domain[-1] * omega)
    return domain
