"""
Lookup Flask Blueprint: multiset equality 증명 JSON API
=========================================================

  POST /lookup/prove          witness → 증명 생성 후 저장, {"id", "bits", "proof"}
  GET  /lookup/proofs/<id>    저장된 증명 조회
  POST /lookup/verify         {"id"} 또는 {"proof", "bits"} → {"valid": bool}
  POST /lookup/proofs/clear   저장된 증명 모두 삭제

prove 요청 예시:
    {"f": [1, 2, 3, 4], "t": [4, 1, 2, 3], "accumulator": "product"}
    {"f": [[1, 2], [3, 4]], "t": [[2, 1], [4, 3]], "sel_f": [1, 0], "sel_t": [0, 1]}
"""

import logging
import uuid

from flask import Blueprint, current_app, jsonify, request
from tinydb import Query

from lookup_kzg.config import SUM
from lookup_kzg.errors import (
    AccumulatorInconsistent, InsufficientSRS, InvalidInput, InvalidProofElement,
    NonZeroRemainder,
)
from lookup_kzg.proof import Proof
from lookup_kzg.prover import prove
from lookup_kzg.srs import SRS
from lookup_kzg.utils import log2_exact
from lookup_kzg.verifier import verify

logger = logging.getLogger(__name__)

lookup_bp = Blueprint('lookup', __name__, url_prefix='/lookup')

DATA = Query()

# DB는 app.py에서 주입
DB = None

# 웹 요청으로 만들 수 있는 최대 도메인 크기 2^MAX_BITS
MAX_BITS = 8

PROOF_PREFIX = "lookup.proof."

_srs_cache = {}


def init_lookup_bp(db):
    """app.py에서 DB를 주입받는다."""
    global DB
    DB = db


# ─── DB 헬퍼 ───

def db_get(key):
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    DB.upsert({"type": key, "data": data}, DATA.type == key)


def db_remove_prefix(prefix):
    DB.remove(DATA.type.test(lambda t: t.startswith(prefix)))


# ─── SRS ───

def get_srs(bits):
    """요청한 도메인에 맞는 SRS를 반환한다 (프로세스 안에서 캐시)."""
    ptau = current_app.config.get("LOOKUP_KZG_PTAU")
    if ptau:
        if ptau not in _srs_cache:
            _srs_cache[ptau] = SRS.from_ptau(ptau)
        return _srs_cache[ptau]

    seed = current_app.config.get("LOOKUP_KZG_SEED")
    key = (bits, seed)
    if key not in _srs_cache:
        logger.info("Generating SRS for power %d", bits)
        _srs_cache[key] = SRS.generate(bits, seed=seed)
    return _srs_cache[key]


def _error(message, status):
    return jsonify({"error": message}), status


def _domain_bits(f):
    """f의 첫 번째 벡터 길이로부터 bits를 구한다."""
    if not isinstance(f, list) or not f:
        raise InvalidInput("f는 비어 있지 않은 리스트여야 합니다")
    column = f[0] if isinstance(f[0], list) else f
    bits = log2_exact(len(column))
    if bits > MAX_BITS:
        raise InvalidInput(f"도메인 크기는 2^{MAX_BITS} 이하여야 합니다")
    return bits


# ──────────────────────────────────────────────────────────────
# 증명 생성
# ──────────────────────────────────────────────────────────────

@lookup_bp.route("/prove", methods=["POST"])
def prove_endpoint():
    """witness로 증명을 만들고 저장한다."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict) or "f" not in body or "t" not in body:
        return _error("f와 t를 담은 JSON 객체가 필요합니다", 400)

    try:
        bits = _domain_bits(body["f"])
        proof = prove(
            body["f"], body["t"], get_srs(bits),
            sel_f=body.get("sel_f"), sel_t=body.get("sel_t"),
            accumulator=body.get("accumulator", SUM),
        )
    except (InvalidInput, InsufficientSRS) as e:
        return _error(str(e), 400)
    except (AccumulatorInconsistent, NonZeroRemainder) as e:
        return _error(str(e), 422)
    except TypeError as e:
        return _error(f"잘못된 witness 값: {e}", 400)

    proof_id = uuid.uuid4().hex
    data = {"id": proof_id, "bits": bits, "proof": proof.to_dict()}
    db_set(PROOF_PREFIX + proof_id, data)
    logger.info("Stored proof %s", proof_id)
    return jsonify(data), 201


@lookup_bp.route("/proofs/<proof_id>")
def get_proof(proof_id):
    data = db_get(PROOF_PREFIX + proof_id)
    if data is None:
        return _error(f"증명 {proof_id}을(를) 찾을 수 없습니다", 404)
    return jsonify(data)


@lookup_bp.route("/proofs/clear", methods=["POST"])
def clear_proofs():
    db_remove_prefix(PROOF_PREFIX)
    return jsonify({"cleared": True})


# ──────────────────────────────────────────────────────────────
# 검증
# ──────────────────────────────────────────────────────────────

@lookup_bp.route("/verify", methods=["POST"])
def verify_endpoint():
    """저장된 증명(id) 또는 요청에 담긴 증명을 검증한다."""
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        return _error("JSON 객체가 필요합니다", 400)

    if "id" in body:
        data = db_get(PROOF_PREFIX + str(body["id"]))
        if data is None:
            return _error(f"증명 {body['id']}을(를) 찾을 수 없습니다", 404)
    else:
        data = body

    bits = data.get("bits")
    if not isinstance(bits, int) or not 0 <= bits <= MAX_BITS:
        return _error(f"bits는 0 이상 {MAX_BITS} 이하의 정수여야 합니다", 400)

    try:
        proof = Proof.from_dict(data.get("proof"))
    except InvalidProofElement as e:
        return _error(str(e), 400)

    try:
        valid = verify(proof, bits, get_srs(bits))
    except InsufficientSRS as e:
        return _error(str(e), 400)
    return jsonify({"valid": valid})
