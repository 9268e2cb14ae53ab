"""
Prover Round 2: 열 결합과 누적자 커밋먼트
==========================================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: β (k > 1), γ               │
  │  Prover → Verifier: [Z] 또는 [S]               │
  └─────────────────────────────────────────────────┘

**열 결합 (k > 1)**:
  F(x) = Σᵢ βⁱ·fᵢ(x),  T(x) = Σᵢ βⁱ·tᵢ(x)
  행 (f₀[j], ..., f_{k-1}[j])이 하나의 원소 F(ωʲ)가 되므로
  벡터 multiset equality가 스칼라 multiset equality로 바뀐다.
  결합한 다항식을 다시 FFT하여 도메인 위의 평가값을 얻는다.

**누적자**:
  product → accumulator.compute_grand_product (Z)
  sum     → accumulator.compute_grand_sum (S)

사용:
    이 모듈은 직접 호출하지 않고, prover.prove()를 통해 실행된다.
"""

from lookup_kzg.accumulator import compute_grand_product, compute_grand_sum
from lookup_kzg.config import PRODUCT
from lookup_kzg.evaluations import Evaluations
from lookup_kzg.kzg import commit


def execute(state):
    log = state.logger
    config = state.config
    transcript = state.transcript

    # ── 1. β 챌린지와 열 결합 ──
    if config.is_vector:
        state.beta = transcript.challenge()
        transcript.append_scalar(state.beta)
        log.debug("··· β = %d", int(state.beta))

        state.f_combined = combine(state.f_polys, state.beta)
        state.t_combined = combine(state.t_polys, state.beta)
        f_evals = Evaluations.from_polynomial(state.f_combined, state.n)
        t_evals = Evaluations.from_polynomial(state.t_combined, state.n)
    else:
        state.f_combined = state.f_polys[0]
        state.t_combined = state.t_polys[0]
        f_evals = state.f_columns[0]
        t_evals = state.t_columns[0]

    # ── 2. γ 챌린지 ──
    state.gamma = transcript.challenge()
    log.debug("··· γ = %d", int(state.gamma))

    # ── 3. 누적자 구성 ──
    if config.accumulator == PRODUCT:
        log.info("> ROUND 2. Compute the grand-product polynomial Z")
        acc_evals = compute_grand_product(
            f_evals, t_evals, state.gamma, state.sel_f, state.sel_t)
    else:
        log.info("> ROUND 2. Compute the grand-sum polynomial S")
        acc_evals = compute_grand_sum(
            f_evals, t_evals, state.gamma, state.sel_f, state.sel_t)
    state.acc_poly = acc_evals.to_polynomial()

    # ── 4. 커밋 및 트랜스크립트 ──
    label = config.accumulator_label
    state.proof.commitments[label] = commit(state.acc_poly, state.srs)

    transcript.append_scalar(state.gamma)
    transcript.append_commitment(state.proof.commitments[label])
    log.debug("··· [%s] = %s", label, state.proof.commitments[label])


def combine(polys, beta):
    """Σᵢ βⁱ·pᵢ 를 가장 높은 인덱스부터 Horner로 계산한다."""
    result = polys[-1]
    for poly in reversed(polys[:-1]):
        result = result * beta + poly
    return result
