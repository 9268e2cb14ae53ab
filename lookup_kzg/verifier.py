"""
Multiset Equality Verifier
============================

증명을 검증한다. 실패는 예외가 아니라 False로 돌려준다.

**검증 과정**:
  1. 증명 요소 검사: 커밋먼트는 G1 위의 점, 평가값은 r 미만의 FR
  2. Fiat-Shamir 트랜스크립트 재생 → β, γ, α, ξ, v, u 챌린지 복원
  3. Z_H(ξ), L₁(ξ) 계산
  4. r₀ 계산 (선형화 다항식의 상수 부분)
  5. 결합 커밋먼트 [D]₁, [F]₁, [E]₁ 구성
  6. 페어링 검사

**핵심 방정식**:
  commit(r) = [D_lin]₁ + r₀·G₁ 이고 r(ξ) = 0 이다.

  [D]₁ = [D_lin]₁ + u·[Acc]₁
  [F]₁ = [D]₁ + Σⱼ vʲ·[Pⱼ]₁
  [E]₁ = (Σⱼ vʲ·pⱼ + u·Acc(ξω) - r₀)·G₁

  e(-([Wξ] + u·[Wξω]), [τ]₂) · e(ξ·[Wξ] + u·ξω·[Wξω] + [F] - [E], [1]₂) = 1

사용 예시:
    >>> from lookup_kzg.verifier import verify
    >>> verify(proof, bits=2, srs=srs)  # True
"""

import logging

from lookup_kzg.config import ArgumentConfig, PRODUCT
from lookup_kzg.errors import InsufficientSRS, InvalidProofElement
from lookup_kzg.field import (
    FR, G1, MAX_DOMAIN_BITS, ec_mul, ec_add, ec_neg, get_root_of_unity,
    is_field_element, is_g1_point, pairing_product_equals,
)
from lookup_kzg.transcript import Transcript
from lookup_kzg.utils import evaluate_l1, evaluate_zh


class Challenges:
    """트랜스크립트에서 복원한 챌린지 묶음. β는 k = 1이면 None이다."""

    def __init__(self, beta, gamma, alpha, xi, v, u):
        self.beta = beta
        self.gamma = gamma
        self.alpha = alpha
        self.xi = xi
        self.v = v
        self.u = u


def verify(proof, bits, srs, config=None, logger=None):
    """증명을 검증한다.

    Args:
        proof: Proof 객체
        bits: 도메인 크기 n = 2^bits (0 ≤ bits ≤ 28, 범위 밖이면 False)
        srs: SRS ([τ]₂만 사용)
        config: ArgumentConfig. None이면 증명의 레이블에서 추론한다.
        logger: 진단 로그를 받을 logging.Logger (기본값: 모듈 로거)

    Returns:
        bool: 검증 성공 여부

    Raises:
        InsufficientSRS: SRS가 도메인보다 작은 경우 (설정 오류)
    """
    log = logger or logging.getLogger(__name__)

    if not isinstance(bits, int) or not 0 <= bits <= MAX_DOMAIN_BITS:
        log.warning("Rejecting proof: domain bits %r outside 0..%d", bits, MAX_DOMAIN_BITS)
        return False

    _, power = srs.header()
    if power < bits:
        raise InsufficientSRS(
            f"도메인 크기 2^{bits}에는 power ≥ {bits}인 SRS가 필요합니다 (현재 {power})"
        )

    # ── Step 1: 증명 요소 검사 ──
    try:
        config = _check_proof(proof, config)
    except InvalidProofElement as e:
        log.warning("Rejecting proof: %s", e)
        return False

    log.info("Verifying multiset equality proof: n=%d, %r", 1 << bits, config)

    # ── Step 2: 트랜스크립트 재생 ──
    ch = compute_challenges(proof, config)
    evals = proof.evaluations
    comms = proof.commitments
    omega = get_root_of_unity(1 << bits)

    # ── Step 3: Z_H(ξ), L₁(ξ) ──
    zh_xi = evaluate_zh(ch.xi, bits)
    l1_xi = evaluate_l1(ch.xi, zh_xi, bits)

    # ── Step 4, 5: r₀와 [D_lin]₁ + u·[Acc]₁ ──
    if config.accumulator == PRODUCT:
        r0, d = _grand_product_terms(proof, config, ch, l1_xi, zh_xi)
    else:
        r0, d = _grand_sum_terms(proof, config, ch, l1_xi, zh_xi)

    f = d
    e_scalar = FR(0)
    v_power = FR(1)
    for comm_label, eval_label in config.opening_labels():
        v_power = v_power * ch.v
        f = ec_add(f, ec_mul(comms[comm_label], v_power))
        e_scalar = e_scalar + v_power * evals[eval_label]
    e_scalar = e_scalar + ch.u * evals[config.accumulator_eval_label] - r0
    e = ec_mul(G1, e_scalar)

    # ── Step 6: 페어링 검사 ──
    w_xi = comms["Wxi"]
    w_xiw = comms["Wxiw"]
    a1 = ec_add(w_xi, ec_mul(w_xiw, ch.u))
    b1 = ec_add(ec_mul(w_xi, ch.xi), ec_mul(w_xiw, ch.u * ch.xi * omega))
    b1 = ec_add(b1, ec_add(f, ec_neg(e)))

    valid = pairing_product_equals(ec_neg(a1), srs.read_g2_point(1), b1, srs.read_g2_point(0))
    if valid:
        log.info("Proof verified")
    else:
        log.warning("Rejecting proof: pairing check failed")
    return valid


def compute_challenges(proof, config):
    """Prover와 같은 순서로 트랜스크립트를 재생하여 챌린지를 복원한다."""
    transcript = Transcript()
    comms = proof.commitments
    evals = proof.evaluations

    for i in range(config.vector_width):
        f_label, t_label = config.column_labels(i)
        transcript.append_commitment(comms[f_label])
        transcript.append_commitment(comms[t_label])
    if config.has_selectors:
        transcript.append_commitment(comms["selF"])
        transcript.append_commitment(comms["selT"])

    beta = None
    if config.is_vector:
        beta = transcript.challenge()
        transcript.append_scalar(beta)

    gamma = transcript.challenge()
    transcript.append_scalar(gamma)
    transcript.append_commitment(comms[config.accumulator_label])

    alpha = transcript.challenge()
    transcript.append_scalar(alpha)
    transcript.append_commitment(comms["Q"])

    xi = transcript.challenge()
    transcript.append_scalar(xi)
    for _, eval_label in config.opening_labels():
        transcript.append_scalar(evals[eval_label])
    transcript.append_scalar(evals[config.accumulator_eval_label])

    v = transcript.challenge()
    transcript.append_scalar(v)
    transcript.append_commitment(comms["Wxi"])
    transcript.append_commitment(comms["Wxiw"])

    u = transcript.challenge()
    return Challenges(beta, gamma, alpha, xi, v, u)


# ─────────────────────────────────────────────────────────────────────
# 증명 요소 검사
# ─────────────────────────────────────────────────────────────────────

def _check_proof(proof, config):
    if config is None:
        config = ArgumentConfig.from_proof(proof)
    else:
        if set(proof.commitments) != set(config.commitment_labels()):
            raise InvalidProofElement("커밋먼트 레이블이 구성과 맞지 않습니다")
        if set(proof.evaluations) != set(config.evaluation_labels()):
            raise InvalidProofElement("평가값 레이블이 구성과 맞지 않습니다")

    for label, point in proof.commitments.items():
        if not is_g1_point(point):
            raise InvalidProofElement(f"커밋먼트 {label}이(가) G1 위의 점이 아닙니다")
    for label, value in proof.evaluations.items():
        if not is_field_element(value):
            raise InvalidProofElement(f"평가값 {label}이(가) FR의 정규 원소가 아닙니다")
    return config


# ─────────────────────────────────────────────────────────────────────
# 누적자별 선형화 항
# ─────────────────────────────────────────────────────────────────────

def _combine_scalars(values, beta):
    """Σᵢ βⁱ·valuesᵢ (Horner, 가장 높은 인덱스부터)."""
    result = values[-1]
    for value in reversed(values[:-1]):
        result = result * beta + value
    return result


def _combine_points(points, beta):
    """Σᵢ βⁱ·[Pᵢ]₁ (Horner, 가장 높은 인덱스부터)."""
    result = points[-1]
    for point in reversed(points[:-1]):
        result = ec_add(ec_mul(result, beta), point)
    return result


def _column_evals(evals, config, which):
    """열마다의 평가값 리스트. which: 0 = f, 1 = t"""
    return [evals[config.column_eval_labels(i)[which]] for i in range(config.vector_width)]


def _selector_constant(evals, config, alpha):
    if not config.has_selectors:
        return FR(0)
    sel_f_xi = evals["selFxi"]
    sel_t_xi = evals["selTxi"]
    alpha2 = alpha * alpha
    alpha3 = alpha2 * alpha
    return (alpha2 * sel_f_xi * (FR(1) - sel_f_xi)
            + alpha3 * sel_t_xi * (FR(1) - sel_t_xi))


def _grand_product_terms(proof, config, ch, l1_xi, zh_xi):
    """Grand product의 (r₀, [D_lin]₁ + u·[Z]₁).

    r₀  = -Lξ + α·Z(ξω)·(selT(ξ)·(γ - 1) + 1) + α²·… + α³·…
    [D] = (Lξ - α·num(ξ) + u)·[Z] + α·Z(ξω)·selT(ξ)·[T] - Zξ·[Q]
    """
    evals = proof.evaluations
    comms = proof.commitments
    alpha = ch.alpha
    gamma = ch.gamma
    zxiw = evals["zxiw"]

    # T는 ξ에서 열지 않으므로 평가값 없이 커밋먼트만 결합한다
    f_xi = _combine_scalars(_column_evals(evals, config, 0), ch.beta)
    t_comm = _combine_points(
        [comms[config.column_labels(i)[1]] for i in range(config.vector_width)],
        ch.beta)
    f_gamma = f_xi + gamma

    if config.has_selectors:
        sel_f_xi = evals["selFxi"]
        sel_t_xi = evals["selTxi"]
        num_xi = sel_f_xi * (f_gamma - FR(1)) + FR(1)
        r0 = -l1_xi + alpha * zxiw * (sel_t_xi * (gamma - FR(1)) + FR(1))
        t_coeff = alpha * zxiw * sel_t_xi
    else:
        num_xi = f_gamma
        r0 = -l1_xi + alpha * zxiw * gamma
        t_coeff = alpha * zxiw
    r0 = r0 + _selector_constant(evals, config, alpha)

    d = ec_mul(comms["Z"], l1_xi - alpha * num_xi + ch.u)
    d = ec_add(d, ec_mul(t_comm, t_coeff))
    d = ec_add(d, ec_neg(ec_mul(comms["Q"], zh_xi)))
    return r0, d


def _grand_sum_terms(proof, config, ch, l1_xi, zh_xi):
    """Grand sum의 (r₀, [D_lin]₁ + u·[S]₁).

    r₀  = α·(S(ξω)·fg·tg + [선택자 없음: f(ξ) - t(ξ)]) + α²·… + α³·…
    [D] = (Lξ - α·fg·tg + u)·[S] + [선택자: α·fg·[selT] - α·tg·[selF]] - Zξ·[Q]
    """
    evals = proof.evaluations
    comms = proof.commitments
    alpha = ch.alpha
    sxiw = evals["sxiw"]

    f_xi = _combine_scalars(_column_evals(evals, config, 0), ch.beta)
    t_xi = _combine_scalars(_column_evals(evals, config, 1), ch.beta)
    f_gamma = f_xi + ch.gamma
    t_gamma = t_xi + ch.gamma

    r0 = sxiw * f_gamma * t_gamma
    if not config.has_selectors:
        r0 = r0 + (f_xi - t_xi)
    r0 = alpha * r0 + _selector_constant(evals, config, alpha)

    d = ec_mul(comms["S"], l1_xi - alpha * f_gamma * t_gamma + ch.u)
    if config.has_selectors:
        d = ec_add(d, ec_mul(comms["selT"], alpha * f_gamma))
        d = ec_add(d, ec_neg(ec_mul(comms["selF"], alpha * t_gamma)))
    d = ec_add(d, ec_neg(ec_mul(comms["Q"], zh_xi)))
    return r0, d
