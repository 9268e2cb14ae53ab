"""
인자 구성(ArgumentConfig)과 증명 레이블
=========================================

증명 세션 시작 시 한 번 정해지는 구성을 표현한다.

  - vector_width (k): 열의 개수. k > 1이면 챌린지 β로 열들을 하나로 접는다.
  - has_selectors: selF, selT 선택자 사용 여부
  - accumulator: "product" (grand product Z) 또는 "sum" (grand sum S)

Prover와 Verifier는 이 객체 하나로 증명에 들어갈 레이블과
일괄 열기 순서를 결정한다.

레이블 예시 (k = 1, sum, 선택자 없음):
  commitments: F, T, S, Q, Wxi, Wxiw
  evaluations: fxi, txi, sxiw
"""

import os
import re

from lookup_kzg.errors import InvalidInput, InvalidProofElement

PRODUCT = "product"
SUM = "sum"
ACCUMULATORS = (PRODUCT, SUM)

# 결정론적 SRS의 기본 시드
DEFAULT_SEED = 12345


def load_settings(environ=None):
    """환경 변수에서 CLI/앱 설정을 읽는다.

      LOOKUP_KZG_PTAU       ptau 파일 경로 (없으면 시드로 SRS 생성)
      LOOKUP_KZG_SEED       SRS 시드 (기본값 12345)
      LOOKUP_KZG_LOG_LEVEL  로그 레벨 (기본값 WARNING)
      LOOKUP_KZG_DB         TinyDB 파일 (기본값 db.json)
    """
    environ = os.environ if environ is None else environ
    seed = environ.get("LOOKUP_KZG_SEED", str(DEFAULT_SEED))
    try:
        seed = int(seed)
    except ValueError as e:
        raise InvalidInput(f"LOOKUP_KZG_SEED는 정수여야 합니다: {seed!r}") from e
    return {
        "ptau": environ.get("LOOKUP_KZG_PTAU") or None,
        "seed": seed,
        "log_level": environ.get("LOOKUP_KZG_LOG_LEVEL", "WARNING"),
        "db": environ.get("LOOKUP_KZG_DB", "db.json"),
    }


class ArgumentConfig:
    """증명 한 개의 모양을 결정하는 구성.

    속성:
        vector_width: 열 개수 k (≥ 1)
        has_selectors: 선택자 사용 여부
        accumulator: "product" 또는 "sum"
    """

    def __init__(self, vector_width=1, has_selectors=False, accumulator=SUM):
        if vector_width < 1:
            raise InvalidInput(f"vector_width는 1 이상이어야 합니다: {vector_width}")
        if accumulator not in ACCUMULATORS:
            raise InvalidInput(f"알 수 없는 누적자 종류: {accumulator!r}")
        self.vector_width = vector_width
        self.has_selectors = has_selectors
        self.accumulator = accumulator

    @classmethod
    def for_witness(cls, f_columns, sel_f, accumulator):
        """Prover 쪽: 정규화된 witness에서 구성을 만든다."""
        return cls(len(f_columns), sel_f is not None, accumulator)

    @classmethod
    def from_proof(cls, proof):
        """Verifier 쪽: 증명의 커밋먼트 레이블에서 구성을 추론한다.

        열 개수는 F0, F1, ...의 개수로, 선택자 여부는 selF의 존재로,
        누적자 종류는 Z / S 중 어느 것이 있는지로 결정한다.

        Raises:
            InvalidProofElement: 레이블 조합이 어떤 구성에도 맞지 않는 경우
        """
        labels = set(proof.commitments)

        if "Z" in labels and "S" not in labels:
            accumulator = PRODUCT
        elif "S" in labels and "Z" not in labels:
            accumulator = SUM
        else:
            raise InvalidProofElement("증명에 누적자 커밋먼트(Z 또는 S)가 하나만 있어야 합니다")

        indexed = [label for label in labels if re.fullmatch(r"F\d+", label)]
        vector_width = len(indexed) if indexed else 1

        config = cls(vector_width, "selF" in labels, accumulator)
        if labels != set(config.commitment_labels()):
            raise InvalidProofElement(
                f"커밋먼트 레이블이 구성과 맞지 않습니다: {sorted(labels)}"
            )
        if set(proof.evaluations) != set(config.evaluation_labels()):
            raise InvalidProofElement(
                f"평가값 레이블이 구성과 맞지 않습니다: {sorted(proof.evaluations)}"
            )
        return config

    @property
    def is_vector(self):
        return self.vector_width > 1

    # ── 레이블 ──────────────────────────────────────────────────────

    def column_labels(self, i):
        """i번째 열의 커밋먼트 레이블 (F, T) 또는 (F{i}, T{i})."""
        if self.is_vector:
            return f"F{i}", f"T{i}"
        return "F", "T"

    def column_eval_labels(self, i):
        """i번째 열의 평가값 레이블 (fxi, txi) 또는 (f{i}xi, t{i}xi)."""
        if self.is_vector:
            return f"f{i}xi", f"t{i}xi"
        return "fxi", "txi"

    @property
    def accumulator_label(self):
        return "Z" if self.accumulator == PRODUCT else "S"

    @property
    def accumulator_eval_label(self):
        return "zxiw" if self.accumulator == PRODUCT else "sxiw"

    def opening_labels(self):
        """ξ에서 여는 다항식의 (커밋먼트 레이블, 평가값 레이블) 목록.

        순서가 곧 일괄 열기 가중치 v¹, v², ...의 순서이다.
          product: f₀, ..., f_{k-1}, [selF, selT]
          sum:     f₀, t₀, f₁, t₁, ..., [selF, selT]
        """
        result = []
        for i in range(self.vector_width):
            f_label, t_label = self.column_labels(i)
            f_eval, t_eval = self.column_eval_labels(i)
            result.append((f_label, f_eval))
            if self.accumulator == SUM:
                result.append((t_label, t_eval))
        if self.has_selectors:
            result.append(("selF", "selFxi"))
            result.append(("selT", "selTxi"))
        return result

    def commitment_labels(self):
        labels = []
        for i in range(self.vector_width):
            labels.extend(self.column_labels(i))
        if self.has_selectors:
            labels.extend(["selF", "selT"])
        labels.extend([self.accumulator_label, "Q", "Wxi", "Wxiw"])
        return labels

    def evaluation_labels(self):
        labels = [eval_label for _, eval_label in self.opening_labels()]
        labels.append(self.accumulator_eval_label)
        return labels

    def __eq__(self, other):
        if not isinstance(other, ArgumentConfig):
            return False
        return (self.vector_width, self.has_selectors, self.accumulator) == (
            other.vector_width, other.has_selectors, other.accumulator)

    def __repr__(self):
        return (f"ArgumentConfig(vector_width={self.vector_width}, "
                f"has_selectors={self.has_selectors}, accumulator={self.accumulator!r})")
