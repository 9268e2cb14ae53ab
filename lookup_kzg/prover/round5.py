"""
Prover Round 5: 선형화 다항식 + 일괄 KZG 열기 증명
====================================================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: v  (Fiat-Shamir)           │
  │  Prover → Verifier: [Wξ]₁, [Wξω]₁              │
  └─────────────────────────────────────────────────┘

**선형화 다항식 r(x)**:
  Round 3의 제약 다항식에서, ξ에서 연 값을 아는 항은 상수로 바꾸고
  나머지는 다항식으로 남긴 것이다. 구성상 r(ξ) = 0 이다.
  (Lξ = L₁(ξ), Zξ = Z_H(ξ), fg = F(ξ) + γ, tg = T(ξ) + γ)

  Grand product:
    r(x) = Lξ·(Z(x) - 1)
         + α·[Z(ξω)·(selT(ξ)·(T(x) + γ - 1) + 1) - num(ξ)·Z(x)]
         + α²·selF(ξ)(1 - selF(ξ)) + α³·selT(ξ)(1 - selT(ξ))
         - Zξ·Q(x)

  Grand sum:
    r(x) = Lξ·S(x)
         + α·[(S(ξω) - S(x))·fg·tg - (selF(x)·tg - selT(x)·fg)]
         + α²·… + α³·…
         - Zξ·Q(x)

**일괄 열기**:
  Wξ(x)  = (r(x) + Σⱼ vʲ·(Pⱼ(x) - Pⱼ(ξ))) / (x - ξ)
  Wξω(x) = (Acc(x) - Acc(ξω)) / (x - ξω)

  Pⱼ는 config.opening_labels() 순서의 다항식이며 가중치는 v¹부터 시작한다.

사용:
    이 모듈은 직접 호출하지 않고, prover.prove()를 통해 실행된다.
"""

from lookup_kzg.config import PRODUCT
from lookup_kzg.field import FR
from lookup_kzg.kzg import commit, create_witness
from lookup_kzg.utils import evaluate_l1, evaluate_zh


def execute(state):
    log = state.logger
    log.info("> ROUND 5. Compute the linearisation and opening proof polynomials")

    proof = state.proof
    transcript = state.transcript
    opened = state.opened_polynomials()
    acc_eval_label = state.config.accumulator_eval_label

    # ── 1. v 챌린지 ──
    transcript.append_scalar(state.xi)
    for _, _, eval_label in opened:
        transcript.append_scalar(proof.evaluations[eval_label])
    transcript.append_scalar(proof.evaluations[acc_eval_label])
    state.v = transcript.challenge()
    log.debug("··· v = %d", int(state.v))

    # ── 2. 선형화 다항식 r(x) ──
    if state.config.accumulator == PRODUCT:
        r = _grand_product_linearisation(state)
    else:
        r = _grand_sum_linearisation(state)

    # ── 3. Wξ(x): r(x)와 열린 다항식들의 v-결합 ──
    numerator = r
    v_power = FR(1)
    for poly, _, eval_label in opened:
        v_power = v_power * state.v
        numerator = numerator + (poly - proof.evaluations[eval_label]) * v_power
    w_xi = numerator.divide_by_linear_factor(state.xi)

    # ── 4. Wξω(x) ──
    xi_omega = state.xi * state.omega
    w_xiw_commitment = create_witness(state.acc_poly, xi_omega, state.srs)

    # ── 5. 커밋 및 트랜스크립트 ──
    proof.commitments["Wxi"] = commit(w_xi, state.srs)
    proof.commitments["Wxiw"] = w_xiw_commitment

    transcript.append_scalar(state.v)
    transcript.append_commitment(proof.commitments["Wxi"])
    transcript.append_commitment(proof.commitments["Wxiw"])
    state.u = transcript.challenge()
    log.debug("··· [Wxi] = %s", proof.commitments["Wxi"])
    log.debug("··· [Wxiw] = %s", proof.commitments["Wxiw"])


def _common_terms(state):
    zh_xi = evaluate_zh(state.xi, state.bits)
    l1_xi = evaluate_l1(state.xi, zh_xi, state.bits)
    return zh_xi, l1_xi


def _selector_terms(state):
    """α²·selF(ξ)(1 - selF(ξ)) + α³·selT(ξ)(1 - selT(ξ)), 선택자가 없으면 0."""
    if not state.config.has_selectors:
        return FR(0)
    sel_f_xi = state.proof.evaluations["selFxi"]
    sel_t_xi = state.proof.evaluations["selTxi"]
    alpha2 = state.alpha * state.alpha
    alpha3 = alpha2 * state.alpha
    return (alpha2 * sel_f_xi * (FR(1) - sel_f_xi)
            + alpha3 * sel_t_xi * (FR(1) - sel_t_xi))


def _grand_product_linearisation(state):
    gamma = state.gamma
    alpha = state.alpha
    z = state.acc_poly
    zxiw = state.proof.evaluations["zxiw"]
    zh_xi, l1_xi = _common_terms(state)

    f_gamma = state.f_combined.evaluate(state.xi) + gamma

    if state.config.has_selectors:
        sel_f_xi = state.proof.evaluations["selFxi"]
        sel_t_xi = state.proof.evaluations["selTxi"]
        num_xi = sel_f_xi * (f_gamma - FR(1)) + FR(1)
        den_part = (state.t_combined + (gamma - FR(1))) * (zxiw * sel_t_xi) + zxiw
    else:
        num_xi = f_gamma
        den_part = (state.t_combined + gamma) * zxiw

    r = (z - 1) * l1_xi
    r = r + (den_part - z * num_xi) * alpha
    r = r + _selector_terms(state)
    return r - state.q_poly * zh_xi


def _grand_sum_linearisation(state):
    gamma = state.gamma
    alpha = state.alpha
    s = state.acc_poly
    sxiw = state.proof.evaluations["sxiw"]
    zh_xi, l1_xi = _common_terms(state)

    f_xi = state.f_combined.evaluate(state.xi)
    t_xi = state.t_combined.evaluate(state.xi)
    f_gamma = f_xi + gamma
    t_gamma = t_xi + gamma

    transition = (-s + sxiw) * (f_gamma * t_gamma)
    if state.config.has_selectors:
        transition = transition - (state.sel_f_poly * t_gamma - state.sel_t_poly * f_gamma)
    else:
        transition = transition + (f_xi - t_xi)

    r = s * l1_xi
    r = r + transition * alpha
    r = r + _selector_terms(state)
    return r - state.q_poly * zh_xi
