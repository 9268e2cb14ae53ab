"""
Multiset Equality End-to-End 테스트
=====================================

prove → verify 전체 파이프라인을 테스트한다.

테스트 범위:
  - 완전성(completeness): 누적자 × {기본, 선택자, 벡터, 벡터 + 선택자}
  - n = 8 도메인
  - 건전성(soundness): 조작된 증명 요소 검증 실패
  - 다른 witness의 커밋먼트로 바꿔 끼운 증명 거부
  - JSON 직렬화 후 검증
"""

import logging
import random

import pytest

from lookup_kzg.config import ArgumentConfig, PRODUCT, SUM
from lookup_kzg.errors import InsufficientSRS
from lookup_kzg.evaluations import Evaluations
from lookup_kzg.field import FR, CURVE_ORDER, G1
from lookup_kzg.kzg import commit
from lookup_kzg.proof import Proof
from lookup_kzg.prover import prove
from lookup_kzg.srs import SRS
from lookup_kzg.verifier import verify

from py_ecc import bn128


# ── 테스트 witness ──

F = [1, 2, 3, 4]
T = [4, 1, 2, 3]

# 선택된 행만 보면 둘 다 {1, 2, 3}
SEL_F_VALUES = [5, 1, 2, 3]
SEL_T_VALUES = [1, 9, 2, 3]
SEL_F = [0, 1, 1, 1]
SEL_T = [1, 0, 1, 1]

# 3열 벡터: T는 F의 행을 회전한 것
VEC_F = [[1, 2, 3, 4], [5, 6, 7, 8], [9, 10, 11, 12]]
VEC_T = [[col[3], col[0], col[1], col[2]] for col in VEC_F]

# 3열 벡터 + 선택자: F는 1번 행이 빠지고, T는 1번 행 자리가 쓰레기 값
VEC_SEL_F = [[40, 1, 2, 3], [50, 5, 6, 7], [60, 9, 10, 11]]
VEC_SEL_T = [[3, 77, 1, 2], [7, 78, 5, 6], [11, 79, 9, 10]]
VEC_SEL_F_SEL = [0, 1, 1, 1]
VEC_SEL_T_SEL = [1, 0, 1, 1]

CASES = {
    "plain": dict(f=F, t=T),
    "selected": dict(f=SEL_F_VALUES, t=SEL_T_VALUES, sel_f=SEL_F, sel_t=SEL_T),
    "vector3": dict(f=VEC_F, t=VEC_T),
    "vector3_selected": dict(f=VEC_SEL_F, t=VEC_SEL_T,
                             sel_f=VEC_SEL_F_SEL, sel_t=VEC_SEL_T_SEL),
}


@pytest.fixture(scope="module")
def sum_proof(srs2):
    return prove(F, T, srs2, accumulator=SUM)


@pytest.fixture(scope="module")
def product_proof(srs2):
    return prove(F, T, srs2, accumulator=PRODUCT)


# ─────────────────────────────────────────────────────────────────────
# 완전성
# ─────────────────────────────────────────────────────────────────────

class TestCompleteness:

    @pytest.mark.parametrize("accumulator", [PRODUCT, SUM])
    @pytest.mark.parametrize("case", sorted(CASES))
    def test_honest_proof_verifies(self, srs2, accumulator, case):
        proof = prove(srs=srs2, accumulator=accumulator, **CASES[case])
        assert verify(proof, 2, srs2)

    @pytest.mark.parametrize("accumulator", [PRODUCT, SUM])
    def test_larger_domain(self, srs3, accumulator):
        f = [3, 1, 4, 1, 5, 9, 2, 6]
        t = [6, 2, 9, 5, 1, 4, 1, 3]
        proof = prove(f, t, srs3, accumulator=accumulator)
        assert verify(proof, 3, srs3)

    def test_single_row(self):
        srs = SRS.generate(0, seed=1)
        proof = prove([7], [7], srs)
        assert verify(proof, 0, srs)

    def test_explicit_config(self, srs2, sum_proof):
        assert verify(sum_proof, 2, srs2, config=ArgumentConfig(1, False, SUM))

    def test_all_zero_selectors(self, srs2):
        zeros = [0, 0, 0, 0]
        proof = prove(F, [9, 9, 9, 9], srs2, sel_f=zeros, sel_t=zeros)
        assert verify(proof, 2, srs2)

    def test_larger_srs_than_domain(self, srs3, srs2):
        proof = prove(F, T, srs3)
        assert verify(proof, 2, srs3)
        # 같은 시드의 SRS는 [τ]₂가 같으므로 power가 작아도 검증된다
        assert verify(proof, 2, srs2)

    def test_json_round_trip(self, srs2, product_proof):
        restored = Proof.from_json(product_proof.to_json())
        assert restored == product_proof
        assert verify(restored, 2, srs2)


# ─────────────────────────────────────────────────────────────────────
# 건전성: 조작된 증명
# ─────────────────────────────────────────────────────────────────────

class TestTampering:

    @pytest.mark.parametrize("label", ["fxi", "txi", "sxiw"])
    def test_evaluation_changed(self, srs2, sum_proof, label):
        bad = sum_proof.copy()
        bad.evaluations[label] = bad.evaluations[label] + FR(1)
        assert not verify(bad, 2, srs2)

    def test_product_evaluation_changed(self, srs2, product_proof):
        bad = product_proof.copy()
        bad.evaluations["zxiw"] = bad.evaluations["zxiw"] + FR(1)
        assert not verify(bad, 2, srs2)

    def test_commitments_swapped(self, srs2, sum_proof):
        bad = sum_proof.copy()
        bad.commitments["F"], bad.commitments["T"] = (
            sum_proof.commitments["T"], sum_proof.commitments["F"])
        assert not verify(bad, 2, srs2)

    @pytest.mark.parametrize("label", ["Q", "Wxi", "Wxiw"])
    def test_commitment_replaced(self, srs2, sum_proof, label):
        bad = sum_proof.copy()
        bad.commitments[label] = G1
        assert not verify(bad, 2, srs2)

    def test_off_curve_point(self, srs2, sum_proof, caplog):
        bad = sum_proof.copy()
        bad.commitments["Q"] = (bn128.FQ(1), bn128.FQ(1))
        with caplog.at_level(logging.WARNING, logger="lookup_kzg.verifier"):
            assert not verify(bad, 2, srs2)
        assert "Rejecting proof" in caplog.text

    def test_evaluation_out_of_range(self, srs2, sum_proof):
        bad = sum_proof.copy()
        bad.evaluations["fxi"] = int(sum_proof.evaluations["fxi"]) + CURVE_ORDER
        assert not verify(bad, 2, srs2)

    def test_missing_label(self, srs2, sum_proof):
        bad = sum_proof.copy()
        del bad.evaluations["txi"]
        assert not verify(bad, 2, srs2)

    def test_config_mismatch(self, srs2, sum_proof):
        assert not verify(sum_proof, 2, srs2, config=ArgumentConfig(1, False, PRODUCT))

    def test_wrong_domain(self, srs2, sum_proof):
        assert not verify(sum_proof, 1, srs2)

    @pytest.mark.parametrize("bits", [-1, 29])
    def test_domain_bits_out_of_range(self, srs2, sum_proof, bits, caplog):
        with caplog.at_level(logging.WARNING, logger="lookup_kzg.verifier"):
            assert verify(sum_proof, bits, srs2) is False
        assert "domain bits" in caplog.text

    def test_srs_too_small_for_domain(self, srs2, sum_proof):
        with pytest.raises(InsufficientSRS):
            verify(sum_proof, 3, srs2)

    def test_different_srs(self, sum_proof):
        other = SRS.generate(2, seed=43)
        assert not verify(sum_proof, 2, other)


# ─────────────────────────────────────────────────────────────────────
# 건전성: 다른 witness의 커밋먼트
# ─────────────────────────────────────────────────────────────────────

class TestSubstitutedWitness:

    @pytest.mark.parametrize("seed", [0, 1, 2])
    @pytest.mark.parametrize("accumulator", [PRODUCT, SUM])
    def test_flipped_column_rejected(self, srs2, seed, accumulator):
        rng = random.Random(seed)
        f = [rng.randrange(1, 1000) for _ in range(4)]
        t = list(f)
        rng.shuffle(t)
        proof = prove(f, t, srs2, accumulator=accumulator)
        assert verify(proof, 2, srs2)

        flipped = list(f)
        flipped[rng.randrange(4)] += 1
        bad = proof.copy()
        bad.commitments["F"] = commit(Evaluations(flipped).to_polynomial(), srs2)
        assert not verify(bad, 2, srs2)
