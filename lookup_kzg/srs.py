"""
Structured Reference String (SRS)
===================================

KZG 커밋먼트에 필요한 공개 파라미터를 만들거나 읽어들인다.

  SRS = {
      G1 powers: [G1, τ·G1, τ²·G1, ..., τ^(2N-2)·G1]     (N = 2^power)
      G2 powers: [G2, τ·G2]
  }

G1 powers의 개수는 powers-of-tau 파일의 tauG1 구간과 같은 2^(power+1) - 1 이다.
몫 다항식 Q의 차수가 최대 2n-3 이므로 power ≥ bits 이면 모든 커밋이 가능하다.

**두 가지 생성 방법**:
  1. SRS.generate(power, seed): seed에서 τ를 결정론적으로 만든다 (테스트/데모용).
     τ를 아는 사람은 거짓 증명을 만들 수 있으므로 실제 시스템에서는 쓰면 안 된다.
  2. SRS.from_ptau(path): snarkjs 형식의 powers-of-tau 파일을 읽는다.

사용 예시:
    >>> srs = SRS.generate(power=3, seed=42)
    >>> len(srs.g1_powers)  # 15
    >>> srs.header()        # ("bn128", 3)
"""

import hashlib
import logging
import secrets

from py_ecc import bn128

from lookup_kzg.errors import InsufficientSRS, InvalidInput
from lookup_kzg.field import FR, G1, G2, ec_mul, CURVE_ORDER, FIELD_MODULUS

logger = logging.getLogger(__name__)

CURVE_NAME = "bn128"

# ptau 파일의 구간(section) 번호
PTAU_SECTION_HEADER = 1
PTAU_SECTION_TAU_G1 = 2
PTAU_SECTION_TAU_G2 = 3


class SRS:
    """KZG 커밋먼트용 공개 파라미터.

    속성:
        g1_powers: [G1, τ·G1, τ²·G1, ...]
        g2_powers: [G2, τ·G2]
        power: 지원하는 최대 도메인 크기의 log₂
    """

    def __init__(self, g1_powers, g2_powers, power):
        self.g1_powers = g1_powers
        self.g2_powers = g2_powers
        self.power = power

    @property
    def max_degree(self):
        """커밋할 수 있는 최대 다항식 차수."""
        return len(self.g1_powers) - 1

    def header(self):
        """(곡선 이름, power)."""
        return CURVE_NAME, self.power

    def read_g1_powers(self, count):
        """앞에서부터 count개의 G1 powers를 반환한다."""
        if count > len(self.g1_powers):
            raise InsufficientSRS(
                f"G1 powers {count}개가 필요하지만 SRS에는 {len(self.g1_powers)}개뿐입니다"
            )
        return self.g1_powers[:count]

    def read_g2_point(self, index):
        """index번째 G2 power. index=1이 [τ]₂이다."""
        if index >= len(self.g2_powers):
            raise InsufficientSRS(f"G2 power {index}가 SRS에 없습니다")
        return self.g2_powers[index]

    @classmethod
    def generate(cls, power, seed=None):
        """seed에서 결정론적으로 SRS를 생성한다.

        Args:
            power: log₂(최대 도메인 크기)
            seed: τ를 만들 시드. None이면 임의의 τ를 사용한다.
        """
        if seed is not None:
            h = hashlib.sha256(str(seed).encode()).digest()
            tau_int = int.from_bytes(h, "big") % CURVE_ORDER
        else:
            tau_int = secrets.randbelow(CURVE_ORDER - 1) + 1
        tau = FR(tau_int)

        count = (1 << (power + 1)) - 1
        logger.debug("Generating SRS with %d G1 powers (power %d)", count, power)

        g1_powers = []
        tau_power = FR(1)
        for _ in range(count):
            g1_powers.append(ec_mul(G1, tau_power))
            tau_power = tau_power * tau

        g2_powers = [G2, ec_mul(G2, tau)]
        return cls(g1_powers, g2_powers, power)

    @classmethod
    def from_ptau(cls, path):
        """snarkjs powers-of-tau(.ptau) 파일을 읽는다.

        파일 구조:
            "ptau" | u32 version | u32 nSections
            각 구간: u32 id | u64 size | data
            구간 1 (header): u32 n8 | q (n8 바이트) | u32 power | u32 ceremonyPower
            구간 2 (tauG1):  점마다 x, y (각 n8 바이트)
            구간 3 (tauG2):  점마다 x.c0, x.c1, y.c0, y.c1

        모든 정수는 리틀엔디안이며, 좌표는 Montgomery 형식(x·R mod q, R = 2^256)이다.

        Raises:
            InvalidInput: 파일 형식이 잘못되었거나 bn128 파일이 아닌 경우
        """
        with open(path, "rb") as f:
            data = f.read()

        if data[:4] != b"ptau":
            raise InvalidInput(f"{path}: ptau 파일이 아닙니다")
        n_sections = _u32(data, 8)

        sections = {}
        pos = 12
        for _ in range(n_sections):
            section_id = _u32(data, pos)
            size = int.from_bytes(data[pos + 4:pos + 12], "little")
            pos += 12
            if pos + size > len(data):
                raise InvalidInput(f"{path}: 구간 {section_id}이(가) 잘려 있습니다")
            sections.setdefault(section_id, (pos, size))
            pos += size

        for section_id in (PTAU_SECTION_HEADER, PTAU_SECTION_TAU_G1, PTAU_SECTION_TAU_G2):
            if section_id not in sections:
                raise InvalidInput(f"{path}: 구간 {section_id}이(가) 없습니다")

        # ── 1. 헤더 ──
        start, _ = sections[PTAU_SECTION_HEADER]
        n8 = _u32(data, start)
        q = int.from_bytes(data[start + 4:start + 4 + n8], "little")
        if q != FIELD_MODULUS:
            raise InvalidInput(f"{path}: bn128 곡선의 파일이 아닙니다")
        power = _u32(data, start + 4 + n8)
        logger.info("Reading ptau file %s (power %d)", path, power)

        r_inv = pow((1 << (8 * n8)) % q, -1, q)

        def read_fq(offset):
            return int.from_bytes(data[offset:offset + n8], "little") * r_inv % q

        # ── 2. tauG1 ──
        start, size = sections[PTAU_SECTION_TAU_G1]
        count = min(size // (2 * n8), (1 << (power + 1)) - 1)
        g1_powers = []
        for i in range(count):
            offset = start + i * 2 * n8
            x, y = read_fq(offset), read_fq(offset + n8)
            g1_powers.append(_g1_point(x, y, path))

        # ── 3. tauG2 ([G2, τG2]만 필요) ──
        start, size = sections[PTAU_SECTION_TAU_G2]
        if size < 2 * 4 * n8:
            raise InvalidInput(f"{path}: tauG2 구간이 너무 작습니다")
        g2_powers = []
        for i in range(2):
            offset = start + i * 4 * n8
            coords = [read_fq(offset + j * n8) for j in range(4)]
            g2_powers.append(_g2_point(coords, path))

        return cls(g1_powers, g2_powers, power)


def _u32(data, offset):
    return int.from_bytes(data[offset:offset + 4], "little")


def _g1_point(x, y, path):
    if x == 0 and y == 0:
        return None
    point = (bn128.FQ(x), bn128.FQ(y))
    if not bn128.is_on_curve(point, bn128.b):
        raise InvalidInput(f"{path}: tauG1에 곡선 밖의 점이 있습니다")
    return point


def _g2_point(coords, path):
    if all(c == 0 for c in coords):
        return None
    point = (bn128.FQ2(coords[0:2]), bn128.FQ2(coords[2:4]))
    if not bn128.is_on_curve(point, bn128.b2):
        raise InvalidInput(f"{path}: tauG2에 곡선 밖의 점이 있습니다")
    return point
