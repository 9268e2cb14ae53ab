"""
증명(Proof) 컨테이너 및 JSON 직렬화
=====================================

증명은 레이블 → G1 점(커밋먼트)과 레이블 → FR(평가값) 두 개의 매핑이다.
어떤 레이블이 들어가는지는 ArgumentConfig가 결정한다.

JSON 형식:
    {
      "commitments": {"F": "<128 hex>", "T": "...", "S": "...", ...},
      "evaluations": {"fxi": "<64 hex>", "txi": "...", "sxiw": "..."}
    }

  - G1: x ‖ y 각 32바이트 빅엔디안 (무한원점은 64바이트의 0)
  - FR: 32바이트 빅엔디안

역직렬화는 형식(hex, 길이)만 검사한다. 값의 범위와 곡선 위의 점인지는
Verifier가 검사하므로 r 이상의 평가값이나 p 이상의 좌표는 int로 남겨둔다.
"""

import json

from py_ecc.fields import bn128_FQ as FQ

from lookup_kzg.errors import InvalidProofElement
from lookup_kzg.field import FR, CURVE_ORDER, FIELD_MODULUS


class Proof:
    """Multiset equality 증명.

    속성:
        commitments: {레이블: G1 점}  (Round 1~5에서 채워짐)
        evaluations: {레이블: FR}     (Round 4에서 채워짐)
    """

    def __init__(self, commitments=None, evaluations=None):
        self.commitments = dict(commitments or {})
        self.evaluations = dict(evaluations or {})

    def to_dict(self):
        return {
            "commitments": {k: serialize_g1(v) for k, v in self.commitments.items()},
            "evaluations": {k: serialize_fr(v) for k, v in self.evaluations.items()},
        }

    @classmethod
    def from_dict(cls, data):
        """Raises: InvalidProofElement (구조나 hex 형식이 잘못된 경우)"""
        if not isinstance(data, dict):
            raise InvalidProofElement("증명은 JSON 객체여야 합니다")
        commitments = data.get("commitments")
        evaluations = data.get("evaluations")
        if not isinstance(commitments, dict) or not isinstance(evaluations, dict):
            raise InvalidProofElement("증명에 commitments와 evaluations 객체가 있어야 합니다")
        return cls(
            {k: deserialize_g1(v) for k, v in commitments.items()},
            {k: deserialize_fr(v) for k, v in evaluations.items()},
        )

    def to_json(self, indent=None):
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text):
        try:
            data = json.loads(text)
        except ValueError as e:
            raise InvalidProofElement(f"JSON 파싱 실패: {e}") from e
        return cls.from_dict(data)

    def copy(self):
        return Proof(self.commitments, self.evaluations)

    def __eq__(self, other):
        if not isinstance(other, Proof):
            return False
        return (self.commitments == other.commitments
                and self.evaluations == other.evaluations)

    def __repr__(self):
        return (f"Proof(commitments={list(self.commitments)}, "
                f"evaluations={list(self.evaluations)})")


# ─── FR ───

def serialize_fr(val):
    """FR → 64자 hex"""
    return (int(val) % CURVE_ORDER).to_bytes(32, "big").hex()


def deserialize_fr(s):
    """64자 hex → FR (r 이상이면 int 그대로)"""
    value = _parse_hex(s, 32)
    if value < CURVE_ORDER:
        return FR(value)
    return value


# ─── G1 point ───

def serialize_g1(point):
    """G1 점 → 128자 hex (무한원점은 0으로 채움)"""
    if point is None:
        return "00" * 64
    x, y = point
    return (int(x).to_bytes(32, "big") + int(y).to_bytes(32, "big")).hex()


def deserialize_g1(s):
    """128자 hex → G1 점 (p 이상의 좌표는 int 튜플 그대로)"""
    value = _parse_hex(s, 64)
    x, y = value >> 256, value & ((1 << 256) - 1)
    if x == 0 and y == 0:
        return None
    if x >= FIELD_MODULUS or y >= FIELD_MODULUS:
        return (x, y)
    return (FQ(x), FQ(y))


def _parse_hex(s, size):
    if not isinstance(s, str) or len(s) != 2 * size:
        raise InvalidProofElement(f"{2 * size}자리 hex 문자열이어야 합니다: {s!r}")
    try:
        return int.from_bytes(bytes.fromhex(s), "big")
    except ValueError as e:
        raise InvalidProofElement(f"잘못된 hex 문자열: {s!r}") from e
