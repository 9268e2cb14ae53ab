"""
Multiset Equality 인자: 예외 분류
==================================

Prover/Verifier 전체에서 사용하는 예외 계층을 정의한다.

  LookupArgumentError
  ├── InvalidInput            (ValueError)         잘못된 호출 인자
  ├── InsufficientSRS         (ValueError)         SRS 크기 부족
  ├── InvalidProofElement     (ValueError)         곡선 밖의 점 / 범위 밖의 스칼라
  ├── AccumulatorInconsistent (ArithmeticError)    Z(ω⁰) ≠ 1 또는 S(ω⁰) ≠ 0
  ├── NonZeroRemainder        (ArithmeticError)    Z_H(x)로 나누어 떨어지지 않음
  └── ZeroElement             (ZeroDivisionError)  일괄 역원 계산 중 0 원소

InvalidInput, InsufficientSRS는 어떤 라운드도 시작하기 전에 발생한다.
AccumulatorInconsistent, NonZeroRemainder는 witness가 multiset equality를
만족하지 않을 때에만 발생하므로 호출자가 어떻게 드러낼지 결정한다.
"""


class LookupArgumentError(Exception):
    """이 패키지의 모든 예외의 기반 클래스."""


class InvalidInput(LookupArgumentError, ValueError):
    """길이 불일치, 2의 거듭제곱이 아닌 길이, 빈 입력 등."""


class InsufficientSRS(LookupArgumentError, ValueError):
    """SRS가 도메인 크기(또는 커밋할 다항식의 차수)보다 작다."""


class InvalidProofElement(LookupArgumentError, ValueError):
    """증명 요소가 G1 위의 점이 아니거나 FR의 정규 원소가 아니다."""


class AccumulatorInconsistent(LookupArgumentError, ArithmeticError):
    """누적자가 도메인을 한 바퀴 돈 뒤 초기값으로 돌아오지 않는다."""


class NonZeroRemainder(LookupArgumentError, ArithmeticError):
    """다항식 나눗셈의 나머지가 0이 아니다."""


class ZeroElement(LookupArgumentError, ZeroDivisionError):
    """역원을 구할 벡터에 0이 포함되어 있다."""
