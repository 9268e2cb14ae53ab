"""
Fiat-Shamir Transcript (Keccak-256)
=====================================

비대화식(non-interactive) 변환을 위한 Fiat-Shamir 해싱 구현.

**Fiat-Shamir 변환**:
  Verifier가 보내던 랜덤 챌린지를, 지금까지 Prover가 보낸 모든 메시지의
  해시로 대체한다. Verifier도 같은 순서로 메시지를 쌓아 챌린지를 재구성한다.

**인코딩**:
  - 스칼라: 32바이트 빅엔디안
  - G1 점: x ‖ y (각 32바이트 빅엔디안), 무한원점은 64바이트의 0
  - 레이블과 체이닝이 없다. 챌린지는 로그 전체의 keccak256을 r로 축소한 값이며,
    다음 챌린지에 반영하려면 호출자가 직접 append_scalar로 추가한다.

**챌린지 순서** (Prover와 Verifier가 공유):
  [F], [T], [selF], [selT] → β (벡터일 때만) → γ
  → γ, [Z 또는 S] → α → α, [Q] → ξ
  → ξ, 평가값들, 누적자(ξω) → v → v, [Wξ], [Wξω] → u

사용 예시:
    >>> t = Transcript()
    >>> t.append_commitment(commitment)
    >>> gamma = t.challenge()
"""

from Crypto.Hash import keccak

from lookup_kzg.field import FR, CURVE_ORDER


def keccak256(data):
    h = keccak.new(digest_bits=256)
    h.update(data)
    return h.digest()


class Transcript:
    """Keccak-256 기반 Fiat-Shamir 트랜스크립트.

    속성:
        state: 지금까지 추가된 바이트열 (챌린지 계산 후에도 초기화되지 않음)
    """

    def __init__(self):
        self.state = bytearray()

    def append_scalar(self, scalar):
        """FR 원소를 32바이트 빅엔디안으로 추가한다."""
        val = int(scalar) % CURVE_ORDER
        self.state.extend(val.to_bytes(32, "big"))

    def append_commitment(self, point):
        """G1 점을 x ‖ y로 추가한다. 무한원점(None)은 64바이트의 0."""
        if point is None:
            self.state.extend(b"\x00" * 64)
        else:
            x, y = point
            self.state.extend(int(x).to_bytes(32, "big"))
            self.state.extend(int(y).to_bytes(32, "big"))

    def challenge(self):
        """keccak256(state)를 빅엔디안 정수로 읽어 r로 축소한 FR을 반환한다.

        Raises:
            ValueError: 아무것도 추가되지 않은 상태에서 호출한 경우
        """
        if not self.state:
            raise ValueError("빈 트랜스크립트에서는 챌린지를 만들 수 없습니다")
        digest = keccak256(bytes(self.state))
        return FR(int.from_bytes(digest, "big") % CURVE_ORDER)
