"""
Prover 라운드별 테스트.

테스트 대상:
  - 입력 검사: 커밋 전에 InvalidInput / InsufficientSRS
  - multiset이 다른 witness → AccumulatorInconsistent
  - 라운드별 중간 상태 (누적자 경계값, Q 차수, 평가값 레이블)
  - Verifier의 챌린지 재생이 Prover와 일치
  - ArgumentConfig 레이블과 증명에서의 추론
  - 선택자 정규화와 로그
"""

import logging

import pytest

from lookup_kzg.config import ArgumentConfig, PRODUCT, SUM
from lookup_kzg.errors import (
    AccumulatorInconsistent, InsufficientSRS, InvalidInput, InvalidProofElement,
)
from lookup_kzg.field import FR
from lookup_kzg.proof import Proof
from lookup_kzg.prover import prepare, prove, round1, round2, round3, round4, round5
from lookup_kzg.verifier import compute_challenges


F = [1, 2, 3, 4]
T = [4, 1, 2, 3]


def _run_rounds(state):
    for rnd in (round1, round2, round3, round4, round5):
        rnd.execute(state)
    return state


@pytest.fixture
def no_commit(monkeypatch):
    """커밋이 호출되면 실패하도록 round1.commit을 바꿔 둔다."""
    def fail(*args, **kwargs):
        raise AssertionError("commit must not be called")
    monkeypatch.setattr("lookup_kzg.prover.round1.commit", fail)


# ─────────────────────────────────────────────────────────────────────
# 입력 검사
# ─────────────────────────────────────────────────────────────────────

class TestPreconditions:

    def test_length_mismatch(self, srs2, no_commit):
        with pytest.raises(InvalidInput):
            prove([1, 2, 3, 4], [1, 2], srs2)

    def test_not_power_of_two(self, srs2, no_commit):
        with pytest.raises(InvalidInput):
            prove([1, 2, 3], [3, 2, 1], srs2)

    def test_empty(self, srs2, no_commit):
        with pytest.raises(InvalidInput):
            prove([], [], srs2)

    def test_column_count_mismatch(self, srs2, no_commit):
        with pytest.raises(InvalidInput):
            prove([F, F], [T], srs2)

    def test_ragged_columns(self, srs2, no_commit):
        with pytest.raises(InvalidInput):
            prove([F, [1, 2]], [T, [2, 1]], srs2)

    def test_non_boolean_selector(self, srs2, no_commit):
        with pytest.raises(InvalidInput):
            prove(F, T, srs2, sel_f=[1, 2, 1, 1])

    def test_selector_length(self, srs2, no_commit):
        with pytest.raises(InvalidInput):
            prove(F, T, srs2, sel_f=[1, 1], sel_t=[1, 1])

    @pytest.mark.parametrize("f, t", [
        ([0, 0, 0, 0], [0, 0, 0, 0]),
        (F, [0, 0, 0, 0]),
        ([F, [0, 0, 0, 0]], [T, [0, 0, 0, 0]]),
    ])
    def test_zero_column(self, srs2, no_commit, f, t):
        with pytest.raises(InvalidInput):
            prove(f, t, srs2)

    def test_unknown_accumulator(self, srs2, no_commit):
        with pytest.raises(InvalidInput):
            prove(F, T, srs2, accumulator="logup")

    def test_srs_too_small(self, srs2, no_commit):
        with pytest.raises(InsufficientSRS):
            prove(list(range(8)), list(range(8)), srs2)

    @pytest.mark.parametrize("accumulator", [PRODUCT, SUM])
    def test_different_multisets(self, srs2, accumulator):
        with pytest.raises(AccumulatorInconsistent):
            prove(F, [1, 2, 3, 5], srs2, accumulator=accumulator)


# ─────────────────────────────────────────────────────────────────────
# 라운드별 상태
# ─────────────────────────────────────────────────────────────────────

class TestRounds:

    def test_round1_commitments(self, srs2):
        state = prepare(F, T, srs2, sel_f=[0, 1, 1, 1], sel_t=[1, 1, 1, 0])
        round1.execute(state)
        assert set(state.proof.commitments) == {"F", "T", "selF", "selT"}
        assert len(state.transcript.state) == 4 * 64
        assert state.f_polys[0].degree <= 3

    def test_product_accumulator_boundary(self, srs2):
        state = prepare(F, T, srs2, accumulator=PRODUCT)
        round1.execute(state)
        round2.execute(state)
        assert state.beta is None
        assert state.acc_poly.evaluate(FR(1)) == FR(1)
        assert "Z" in state.proof.commitments

    def test_sum_accumulator_boundary(self, srs2):
        state = prepare(F, T, srs2, accumulator=SUM)
        round1.execute(state)
        round2.execute(state)
        assert state.acc_poly.evaluate(FR(1)) == FR(0)
        assert "S" in state.proof.commitments

    def test_vector_draws_beta(self, srs2):
        state = prepare([F, [5, 6, 7, 8]], [T, [8, 5, 6, 7]], srs2)
        round1.execute(state)
        round2.execute(state)
        assert state.beta is not None
        assert state.f_combined == state.f_polys[0] + state.f_polys[1] * state.beta

    @pytest.mark.parametrize("accumulator", [PRODUCT, SUM])
    def test_quotient_fits_srs(self, srs2, accumulator):
        state = prepare(F, T, srs2, sel_f=[1, 1, 0, 1], sel_t=[1, 1, 1, 0],
                        accumulator=accumulator)
        round1.execute(state)
        round2.execute(state)
        round3.execute(state)
        assert state.q_poly.degree <= srs2.max_degree

    def test_product_evaluation_labels(self, srs2):
        state = _run_rounds(prepare(F, T, srs2, accumulator=PRODUCT))
        assert set(state.proof.evaluations) == {"fxi", "zxiw"}

    def test_sum_evaluation_labels(self, srs2):
        state = _run_rounds(prepare(F, T, srs2, accumulator=SUM))
        assert set(state.proof.evaluations) == {"fxi", "txi", "sxiw"}

    def test_accumulator_evaluated_at_shifted_point(self, srs2):
        state = _run_rounds(prepare(F, T, srs2))
        expected = state.acc_poly.evaluate(state.xi * state.omega)
        assert state.proof.evaluations["sxiw"] == expected

    @pytest.mark.parametrize("accumulator", [PRODUCT, SUM])
    def test_verifier_replays_challenges(self, srs2, accumulator):
        state = _run_rounds(prepare(
            [F, [5, 6, 7, 8]], [T, [8, 5, 6, 7]], srs2,
            sel_f=[1, 0, 1, 1], sel_t=[1, 1, 0, 1], accumulator=accumulator))
        ch = compute_challenges(state.proof, state.config)
        assert ch.beta == state.beta
        assert ch.gamma == state.gamma
        assert ch.alpha == state.alpha
        assert ch.xi == state.xi
        assert ch.v == state.v
        assert ch.u == state.u


# ─────────────────────────────────────────────────────────────────────
# ArgumentConfig
# ─────────────────────────────────────────────────────────────────────

class TestArgumentConfig:

    def test_product_opening_order(self):
        config = ArgumentConfig(2, True, PRODUCT)
        assert config.opening_labels() == [
            ("F0", "f0xi"), ("F1", "f1xi"), ("selF", "selFxi"), ("selT", "selTxi"),
        ]

    def test_sum_opening_order(self):
        config = ArgumentConfig(2, False, SUM)
        assert config.opening_labels() == [
            ("F0", "f0xi"), ("T0", "t0xi"), ("F1", "f1xi"), ("T1", "t1xi"),
        ]

    def test_commitment_labels(self):
        config = ArgumentConfig(1, False, SUM)
        assert config.commitment_labels() == ["F", "T", "S", "Q", "Wxi", "Wxiw"]
        assert config.evaluation_labels() == ["fxi", "txi", "sxiw"]

    def test_invalid_arguments(self):
        with pytest.raises(InvalidInput):
            ArgumentConfig(0)
        with pytest.raises(InvalidInput):
            ArgumentConfig(1, False, "logup")

    def test_inferred_from_proof(self, srs2):
        proof = prove([F, F, F], [T, T, T], srs2, sel_f=[1, 1, 0, 1], sel_t=[1, 1, 1, 0],
                      accumulator=PRODUCT)
        assert ArgumentConfig.from_proof(proof) == ArgumentConfig(3, True, PRODUCT)

    def test_inference_rejects_ambiguous_labels(self):
        proof = Proof({"Z": None, "S": None}, {})
        with pytest.raises(InvalidProofElement):
            ArgumentConfig.from_proof(proof)

    def test_inference_rejects_extra_labels(self):
        config = ArgumentConfig(1, False, SUM)
        comms = {label: None for label in config.commitment_labels()}
        comms["X"] = None
        evals = {label: FR(0) for label in config.evaluation_labels()}
        with pytest.raises(InvalidProofElement):
            ArgumentConfig.from_proof(Proof(comms, evals))


# ─────────────────────────────────────────────────────────────────────
# 선택자 정규화 / 로그
# ─────────────────────────────────────────────────────────────────────

class TestSelectorsAndLogging:

    def test_all_one_selectors_are_dropped(self, srs2):
        plain = prove(F, T, srs2)
        trivial = prove(F, T, srs2, sel_f=[1, 1, 1, 1], sel_t=[1, 1, 1, 1])
        assert "selF" not in trivial.commitments
        assert trivial == plain

    def test_missing_selector_defaults_to_ones(self, srs2):
        state = prepare([5, 1, 2, 3], [1, 2, 3, 5], srs2, sel_f=[0, 1, 1, 1])
        assert state.config.has_selectors
        assert state.sel_t.is_all_ones()

    def test_all_zero_selectors_warn(self, srs2, caplog):
        with caplog.at_level(logging.WARNING, logger="lookup_kzg.prover"):
            prepare(F, [9, 9, 9, 9], srs2, sel_f=[0, 0, 0, 0], sel_t=[0, 0, 0, 0])
        assert "all zeros" in caplog.text

    def test_injected_logger(self, srs2, caplog):
        logger = logging.getLogger("tests.lookup.prover")
        with caplog.at_level(logging.INFO, logger="tests.lookup.prover"):
            prove(F, T, srs2, logger=logger)
        assert "> ROUND 1" in caplog.text
        assert "Proof generated" in caplog.text
