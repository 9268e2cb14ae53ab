import pytest

from lookup_kzg.srs import SRS


# ── 테스트 상수 ──
SRS_SEED = 42


@pytest.fixture(scope="session")
def srs2():
    """n = 4 도메인용 SRS (G1 powers 7개)."""
    return SRS.generate(2, seed=SRS_SEED)


@pytest.fixture(scope="session")
def srs3():
    """n = 8 도메인용 SRS (G1 powers 15개)."""
    return SRS.generate(3, seed=SRS_SEED)
