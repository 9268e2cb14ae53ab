"""
Multiset Equality Prover: 5-라운드 프로토콜 오케스트레이터
============================================================

F와 T가 (선택자로 고른 행에 대해) 같은 multiset임을 KZG로 증명한다.

  ┌─────────────────────────────────────────────────────┐
  │  Round 1: 열 다항식 커밋                             │
  │  Prover → Verifier: [Fᵢ], [Tᵢ], ([selF], [selT])  │
  ├─────────────────────────────────────────────────────┤
  │  Round 2: 결합 + 누적자 커밋                         │
  │  Verifier → Prover: β (k > 1), γ                   │
  │  Prover → Verifier: [Z] 또는 [S]                   │
  ├─────────────────────────────────────────────────────┤
  │  Round 3: 몫 다항식 Q 커밋                           │
  │  Verifier → Prover: α                              │
  │  Prover → Verifier: [Q]                            │
  ├─────────────────────────────────────────────────────┤
  │  Round 4: 평가값 산출                                │
  │  Verifier → Prover: ξ                              │
  │  Prover → Verifier: fᵢ(ξ), (tᵢ(ξ)), 누적자(ξω)     │
  ├─────────────────────────────────────────────────────┤
  │  Round 5: 선형화 + 일괄 KZG 열기 증명                │
  │  Verifier → Prover: v                              │
  │  Prover → Verifier: [Wξ], [Wξω]                    │
  └─────────────────────────────────────────────────────┘

입력 검사(길이, 2의 거듭제곱, SRS 크기, 선택자 값)는 Round 1 이전에 모두
끝나므로 실패하면 어떤 커밋먼트도 만들어지지 않는다.

사용 예시:
    >>> from lookup_kzg.prover import prove
    >>> srs = SRS.generate(power=2, seed=42)
    >>> proof = prove([1, 2, 3, 4], [4, 1, 2, 3], srs, accumulator="product")
"""

import logging

from lookup_kzg.config import ArgumentConfig, SUM
from lookup_kzg.errors import InsufficientSRS, InvalidInput
from lookup_kzg.evaluations import Evaluations
from lookup_kzg.field import get_root_of_unity
from lookup_kzg.proof import Proof
from lookup_kzg.transcript import Transcript
from lookup_kzg.utils import log2_exact
from lookup_kzg.prover import round1, round2, round3, round4, round5


class ProverState:
    """라운드 간 공유되는 Prover 상태.

    속성 (입력):
        f_columns, t_columns: Evaluations 리스트 (길이 k)
        sel_f, sel_t: 선택자 Evaluations 또는 None
        config: ArgumentConfig
        srs: SRS
        transcript: Fiat-Shamir 트랜스크립트
        logger: 진단 로그를 받을 logging.Logger

    속성 (라운드 간 생성):
        f_polys, t_polys: 열 다항식 (Round 1)
        sel_f_poly, sel_t_poly: 선택자 다항식 (Round 1)
        f_combined, t_combined: β로 접은 다항식 (Round 2)
        acc_poly: 누적자 Z 또는 S (Round 2)
        q_poly: 몫 다항식 (Round 3)
        beta, gamma, alpha, xi, v, u: 챌린지 값들

    속성 (출력):
        proof: Proof 객체
    """

    def __init__(self, f_columns, t_columns, sel_f, sel_t, config, srs, logger=None):
        self.f_columns = f_columns
        self.t_columns = t_columns
        self.sel_f = sel_f
        self.sel_t = sel_t
        self.config = config
        self.srs = srs
        self.logger = logger or logging.getLogger(__name__)

        self.transcript = Transcript()

        # 도메인 정보
        self.n = len(f_columns[0])
        self.bits = log2_exact(self.n)
        self.omega = get_root_of_unity(self.n)

        # 라운드별 결과
        self.f_polys = []
        self.t_polys = []
        self.sel_f_poly = None
        self.sel_t_poly = None
        self.f_combined = None
        self.t_combined = None
        self.acc_poly = None
        self.q_poly = None

        # 챌린지
        self.beta = None
        self.gamma = None
        self.alpha = None
        self.xi = None
        self.v = None
        self.u = None

        self.proof = Proof()

    def opened_polynomials(self):
        """ξ에서 여는 다항식을 config.opening_labels() 순서로 반환한다."""
        polys = {}
        for i in range(self.config.vector_width):
            f_label, t_label = self.config.column_labels(i)
            polys[f_label] = self.f_polys[i]
            polys[t_label] = self.t_polys[i]
        if self.config.has_selectors:
            polys["selF"] = self.sel_f_poly
            polys["selT"] = self.sel_t_poly
        return [(polys[c], c, e) for c, e in self.config.opening_labels()]

    def build_proof(self):
        return self.proof


def prove(f, t, srs, sel_f=None, sel_t=None, accumulator=SUM, logger=None):
    """Multiset equality 증명을 생성한다.

    Args:
        f, t: 평가 벡터 (정수/FR 리스트) 또는 그 리스트의 리스트 (벡터 인자)
        srs: SRS
        sel_f, sel_t: 선택자 벡터 (0/1). 하나만 주면 다른 쪽은 모두 1로 본다.
        accumulator: "product" 또는 "sum"
        logger: 진단 로그를 받을 logging.Logger (기본값: 모듈 로거)

    Returns:
        Proof

    Raises:
        InvalidInput: 입력 모양이 잘못된 경우 (어떤 라운드도 시작하기 전)
        InsufficientSRS: SRS가 도메인보다 작은 경우
        AccumulatorInconsistent: F와 T의 multiset이 다른 경우
    """
    state = prepare(f, t, srs, sel_f, sel_t, accumulator, logger)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 1: 열/선택자 다항식 커밋                       │
    # └─────────────────────────────────────────────────────┘
    round1.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 2: β로 열 결합, γ로 누적자 구성 후 커밋         │
    # └─────────────────────────────────────────────────────┘
    round2.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 3: α로 제약 결합, Q = C / Z_H 커밋             │
    # └─────────────────────────────────────────────────────┘
    round3.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 4: ξ에서 평가                                 │
    # └─────────────────────────────────────────────────────┘
    round4.execute(state)

    # ┌─────────────────────────────────────────────────────┐
    # │  Round 5: v로 선형화 + 열기 증명 [Wξ], [Wξω]          │
    # └─────────────────────────────────────────────────────┘
    round5.execute(state)

    state.logger.info("Proof generated")
    return state.build_proof()


def prepare(f, t, srs, sel_f=None, sel_t=None, accumulator=SUM, logger=None):
    """입력을 검사하고 Round 1 직전의 ProverState를 만든다.

    라운드를 하나씩 실행하며 중간 상태를 살펴볼 때 사용한다.
    인자와 예외는 prove()와 같다.
    """
    log = logger or logging.getLogger(__name__)

    f_columns = _as_columns(f, "F")
    t_columns = _as_columns(t, "T")
    n = _check_columns(f_columns, t_columns)
    bits = log2_exact(n)

    _, power = srs.header()
    if power < bits:
        raise InsufficientSRS(
            f"도메인 크기 2^{bits}에는 power ≥ {bits}인 SRS가 필요합니다 (현재 {power})"
        )

    sel_f, sel_t = _normalize_selectors(sel_f, sel_t, n, log)
    config = ArgumentConfig.for_witness(f_columns, sel_f, accumulator)

    log.info("Proving multiset equality: n=%d, %r", n, config)
    return ProverState(f_columns, t_columns, sel_f, sel_t, config, srs, log)


# ─────────────────────────────────────────────────────────────────────
# 입력 정규화 및 검사
# ─────────────────────────────────────────────────────────────────────

def _as_columns(values, name):
    """단일 벡터 또는 벡터의 리스트를 Evaluations 리스트로 바꾼다."""
    if isinstance(values, Evaluations):
        return [values]
    values = list(values)
    if not values:
        raise InvalidInput(f"{name}가 비어 있습니다")
    if isinstance(values[0], (list, tuple, Evaluations)):
        return [col if isinstance(col, Evaluations) else Evaluations(col) for col in values]
    return [Evaluations(values)]


def _check_columns(f_columns, t_columns):
    if len(f_columns) != len(t_columns):
        raise InvalidInput(
            f"F와 T의 열 개수가 다릅니다: {len(f_columns)} != {len(t_columns)}"
        )
    n = len(f_columns[0])
    for column in f_columns + t_columns:
        if len(column) != n:
            raise InvalidInput(f"모든 벡터의 길이가 같아야 합니다: {len(column)} != {n}")
    if n == 0:
        raise InvalidInput("빈 벡터로는 증명할 수 없습니다")
    for name, columns in (("F", f_columns), ("T", t_columns)):
        for i, column in enumerate(columns):
            if column.is_all_zeros():
                raise InvalidInput(f"{name}의 {i}번째 열이 영 다항식입니다")
    return n


def _normalize_selectors(sel_f, sel_t, n, log):
    """선택자를 검사하고, 자명한 경우(모두 1) None으로 바꾼다."""
    if sel_f is None and sel_t is None:
        return None, None

    sel_f = Evaluations.ones(n) if sel_f is None else Evaluations(sel_f)
    sel_t = Evaluations.ones(n) if sel_t is None else Evaluations(sel_t)

    for name, sel in (("selF", sel_f), ("selT", sel_t)):
        if len(sel) != n:
            raise InvalidInput(f"{name}의 길이가 {n}이 아닙니다: {len(sel)}")
        if not sel.is_boolean():
            raise InvalidInput(f"{name}의 값은 0 또는 1이어야 합니다")

    if sel_f.is_all_ones() and sel_t.is_all_ones():
        log.debug("Selectors are all ones, running the unselected argument")
        return None, None
    if sel_f.is_all_zeros() and sel_t.is_all_zeros():
        log.warning("Both selectors are all zeros, the argument is trivially satisfied")
    return sel_f, sel_t
