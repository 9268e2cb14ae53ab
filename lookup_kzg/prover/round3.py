"""
Prover Round 3: 몫 다항식 Q(x) 커밋먼트
=========================================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: α  (Fiat-Shamir)           │
  │  Prover → Verifier: [Q]                        │
  └─────────────────────────────────────────────────┘

**제약 항** (F, T는 Round 2에서 결합한 다항식):

  Grand product:
    L₁(x)·(Z(x) - 1)
    + α·[Z(ωx)·den(x) - Z(x)·num(x)]
    num = selF·(F + γ - 1) + 1,  den = selT·(T + γ - 1) + 1
    (선택자가 없으면 num = F + γ,  den = T + γ)

  Grand sum:
    L₁(x)·S(x)
    + α·[(S(ωx) - S(x))·(F + γ)(T + γ) - (selF·(T + γ) - selT·(F + γ))]
    (선택자가 없으면 두 번째 부분은 T - F)

  선택자가 있으면 두 선택자가 0/1 값임을 강제하는 항을 더한다:
    + α²·selF·(1 - selF) + α³·selT·(1 - selT)

  결합: C(x), Q(x) = C(x) / Z_H(x)

C의 차수는 최대 3n-3, Q는 2n-3 이므로 2n-1개의 G1 powers로 충분하다.

사용:
    이 모듈은 직접 호출하지 않고, prover.prove()를 통해 실행된다.
"""

from lookup_kzg.config import PRODUCT
from lookup_kzg.kzg import commit
from lookup_kzg.polynomial import lagrange_first


def execute(state):
    """Round 3을 실행한다.

    Raises:
        NonZeroRemainder: C(x)가 Z_H(x)로 나누어 떨어지지 않는 경우
    """
    log = state.logger
    log.info("> ROUND 3. Compute the quotient polynomial Q")

    # ── 1. α 챌린지 ──
    state.alpha = state.transcript.challenge()
    log.debug("··· α = %d", int(state.alpha))

    # ── 2. 제약 다항식 C(x) ──
    if state.config.accumulator == PRODUCT:
        constraint = _grand_product_constraint(state)
    else:
        constraint = _grand_sum_constraint(state)

    if state.config.has_selectors:
        alpha2 = state.alpha * state.alpha
        alpha3 = alpha2 * state.alpha
        sel_f = state.sel_f_poly
        sel_t = state.sel_t_poly
        constraint = constraint + (sel_f * (1 - sel_f)) * alpha2
        constraint = constraint + (sel_t * (1 - sel_t)) * alpha3

    # ── 3. Q(x) = C(x) / Z_H(x) ──
    state.q_poly = constraint.divide_by_vanishing(state.n)

    # ── 4. 커밋 및 트랜스크립트 ──
    state.proof.commitments["Q"] = commit(state.q_poly, state.srs)

    state.transcript.append_scalar(state.alpha)
    state.transcript.append_commitment(state.proof.commitments["Q"])
    log.debug("··· [Q] = %s", state.proof.commitments["Q"])


def _grand_product_constraint(state):
    gamma = state.gamma
    z = state.acc_poly
    z_shift = z.shift_by_generator(state.omega)
    f_gamma = state.f_combined + gamma
    t_gamma = state.t_combined + gamma

    if state.config.has_selectors:
        num = state.sel_f_poly * (f_gamma - 1) + 1
        den = state.sel_t_poly * (t_gamma - 1) + 1
    else:
        num = f_gamma
        den = t_gamma

    boundary = (z - 1) * lagrange_first(state.n)
    transition = z_shift * den - z * num
    return boundary + transition * state.alpha


def _grand_sum_constraint(state):
    gamma = state.gamma
    s = state.acc_poly
    s_shift = s.shift_by_generator(state.omega)
    f_gamma = state.f_combined + gamma
    t_gamma = state.t_combined + gamma

    if state.config.has_selectors:
        num = state.sel_f_poly * t_gamma - state.sel_t_poly * f_gamma
    else:
        num = state.t_combined - state.f_combined

    boundary = s * lagrange_first(state.n)
    transition = (s_shift - s) * (f_gamma * t_gamma) - num
    return boundary + transition * state.alpha
