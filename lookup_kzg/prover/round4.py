"""
Prover Round 4: 평가값 산출
============================

  ┌─────────────────────────────────────────────────┐
  │  Verifier → Prover: ξ  (Fiat-Shamir)           │
  │  Prover → Verifier: fᵢ(ξ), [tᵢ(ξ)],            │
  │                     [selF(ξ), selT(ξ)], Acc(ξω) │
  └─────────────────────────────────────────────────┘

평가값은 config.opening_labels() 순서로 증명에 기록되고
Round 5의 트랜스크립트에도 같은 순서로 들어간다.
grand product는 T를 ξ에서 열지 않는다 (선형화에서 [T]가 그대로 쓰인다).

사용:
    이 모듈은 직접 호출하지 않고, prover.prove()를 통해 실행된다.
"""


def execute(state):
    log = state.logger
    log.info("> ROUND 4. Compute the opening evaluations")

    # ── 1. ξ 챌린지 ──
    state.xi = state.transcript.challenge()
    log.debug("··· ξ = %d", int(state.xi))

    # ── 2. ξ에서 열 다항식/선택자 평가 ──
    for poly, _, eval_label in state.opened_polynomials():
        state.proof.evaluations[eval_label] = poly.evaluate(state.xi)

    # ── 3. ξω에서 누적자 평가 ──
    xi_omega = state.xi * state.omega
    label = state.config.accumulator_eval_label
    state.proof.evaluations[label] = state.acc_poly.evaluate(xi_omega)
