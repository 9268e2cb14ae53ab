"""
누적자(Accumulator) 다항식 구성
================================

multiset equality를 하나의 다항식 항등식으로 바꾸는 두 가지 방법을 제공한다.
두 방법 모두 분모를 batch_inverse 한 번으로 역원 처리한다.

**Grand product Z**:
  Z(ω⁰) = 1
  Z(ω^(i+1)) = Z(ωⁱ) · (fᵢ + γ) / (tᵢ + γ)
  multiset이 같으면 한 바퀴 돈 뒤 다시 1이 된다.

  선택자가 있으면 선택되지 않은 행의 인수를 1로 바꾼다:
    num = selF·(f + γ - 1) + 1,  den = selT·(t + γ - 1) + 1

**Grand sum S** (로그 미분):
  S(ω⁰) = 0
  S(ω^(i+1)) = S(ωⁱ) + selFᵢ/(fᵢ + γ) - selTᵢ/(tᵢ + γ)
             = S(ωⁱ) + (selFᵢ·(tᵢ + γ) - selTᵢ·(fᵢ + γ)) / ((fᵢ + γ)(tᵢ + γ))
  multiset이 같으면 한 바퀴 돈 뒤 다시 0이 된다.
"""

import logging

from lookup_kzg.errors import AccumulatorInconsistent
from lookup_kzg.evaluations import Evaluations
from lookup_kzg.field import FR
from lookup_kzg.utils import batch_inverse

logger = logging.getLogger(__name__)


def compute_grand_product(f, t, gamma, sel_f=None, sel_t=None):
    """Grand product 누적자 Z의 평가값을 계산한다.

    Args:
        f, t: 결합된 평가 벡터 (Evaluations)
        gamma: 챌린지 γ
        sel_f, sel_t: 선택자 벡터 (둘 다 None이면 모든 행 선택)

    Returns:
        Evaluations: Z(ω⁰), ..., Z(ω^(n-1))

    Raises:
        AccumulatorInconsistent: 곱이 1로 돌아오지 않는 경우
        ZeroElement: 어떤 분모가 0인 경우
    """
    n = len(f)
    selected = sel_f is not None

    num = []
    den = []
    for i in range(n):
        num_i = f[i] + gamma
        den_i = t[i] + gamma
        if selected:
            num_i = sel_f[i] * (num_i - FR(1)) + FR(1)
            den_i = sel_t[i] * (den_i - FR(1)) + FR(1)
        num.append(num_i)
        den.append(den_i)

    den_inv = batch_inverse(den)

    z = [FR(0)] * n
    acc = FR(1)
    for i in range(n):
        acc = acc * num[i] * den_inv[i]
        z[(i + 1) % n] = acc

    if z[0] != 1:
        raise AccumulatorInconsistent(
            "grand product가 1로 돌아오지 않습니다 (F와 T의 multiset이 다릅니다)"
        )
    logger.debug("··· Grand product closes over %d rows", n)
    return Evaluations(z)


def compute_grand_sum(f, t, gamma, sel_f=None, sel_t=None):
    """Grand sum 누적자 S의 평가값을 계산한다.

    선택자가 없으면 selF = selT = 1로 계산한다.

    Raises:
        AccumulatorInconsistent: 합이 0으로 돌아오지 않는 경우
        ZeroElement: 어떤 분모가 0인 경우
    """
    n = len(f)

    num = []
    den = []
    for i in range(n):
        f_gamma = f[i] + gamma
        t_gamma = t[i] + gamma
        if sel_f is not None:
            num.append(sel_f[i] * t_gamma - sel_t[i] * f_gamma)
        else:
            num.append(t_gamma - f_gamma)
        den.append(f_gamma * t_gamma)

    den_inv = batch_inverse(den)

    s = [FR(0)] * n
    acc = FR(0)
    for i in range(n):
        acc = acc + num[i] * den_inv[i]
        s[(i + 1) % n] = acc

    if s[0] != 0:
        raise AccumulatorInconsistent(
            "grand sum이 0으로 돌아오지 않습니다 (F와 T의 multiset이 다릅니다)"
        )
    logger.debug("··· Grand sum closes over %d rows", n)
    return Evaluations(s)
