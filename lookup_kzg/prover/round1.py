"""
Prover Round 1: 열(Column) 다항식 커밋먼트
===========================================

  ┌─────────────────────────────────────────────────┐
  │  Prover → Verifier: [Fᵢ], [Tᵢ], [selF], [selT] │
  │                                                 │
  │  입력:  평가 벡터 fᵢ, tᵢ, 선택자, SRS            │
  │  출력:  2k (+2)개의 KZG 커밋먼트                 │
  └─────────────────────────────────────────────────┘

**과정**:
  1. 각 평가 벡터를 IFFT로 보간: fᵢ(ωʲ) = fᵢ[j]
  2. KZG 커밋
  3. 트랜스크립트에 [F₀], [T₀], [F₁], [T₁], ..., [selF], [selT] 순서로 추가

블라인딩은 하지 않는다. 이 인자의 목적은 건전성(soundness)이며,
커밋할 다항식의 차수를 2n-2 이하로 유지해야 SRS 크기가 맞는다.

사용:
    이 모듈은 직접 호출하지 않고, prover.prove()를 통해 실행된다.
"""

from lookup_kzg.kzg import commit


def execute(state):
    """Round 1을 실행한다.

    Args:
        state: ProverState. f_columns, t_columns, 선택자를 읽고
               f_polys, t_polys, sel_f_poly, sel_t_poly와 커밋먼트를 기록한다.
    """
    log = state.logger
    log.info("> ROUND 1. Compute the column polynomial commitments")

    config = state.config
    proof = state.proof

    # ── 1. 열 다항식 보간 및 커밋 ──
    for i in range(config.vector_width):
        f_poly = state.f_columns[i].to_polynomial()
        t_poly = state.t_columns[i].to_polynomial()
        state.f_polys.append(f_poly)
        state.t_polys.append(t_poly)

        f_label, t_label = config.column_labels(i)
        proof.commitments[f_label] = commit(f_poly, state.srs)
        proof.commitments[t_label] = commit(t_poly, state.srs)

        state.transcript.append_commitment(proof.commitments[f_label])
        state.transcript.append_commitment(proof.commitments[t_label])
        log.debug("··· [%s] = %s", f_label, proof.commitments[f_label])
        log.debug("··· [%s] = %s", t_label, proof.commitments[t_label])

    # ── 2. 선택자 다항식 ──
    if config.has_selectors:
        state.sel_f_poly = state.sel_f.to_polynomial()
        state.sel_t_poly = state.sel_t.to_polynomial()
        proof.commitments["selF"] = commit(state.sel_f_poly, state.srs)
        proof.commitments["selT"] = commit(state.sel_t_poly, state.srs)

        state.transcript.append_commitment(proof.commitments["selF"])
        state.transcript.append_commitment(proof.commitments["selT"])
