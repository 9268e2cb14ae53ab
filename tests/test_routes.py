"""
Lookup Flask Blueprint 테스트 (메모리 TinyDB).
"""

import pytest

from app import create_app
from lookup_kzg.field import FR
from lookup_kzg.proof import deserialize_fr, serialize_fr


@pytest.fixture
def client():
    app = create_app({
        "TESTING": True,
        "LOOKUP_KZG_DB": None,
        "LOOKUP_KZG_SEED": 7,
        "LOOKUP_KZG_PTAU": None,
    })
    return app.test_client()


def _prove(client, **body):
    body.setdefault("f", [1, 2, 3, 4])
    body.setdefault("t", [4, 1, 2, 3])
    return client.post("/lookup/prove", json=body)


class TestIndex:

    def test_lists_endpoints(self, client):
        resp = client.get("/")
        assert resp.status_code == 200
        assert "POST /lookup/prove" in resp.get_json()["endpoints"]


class TestProve:

    def test_prove_stores_proof(self, client):
        resp = _prove(client, accumulator="product")
        assert resp.status_code == 201
        data = resp.get_json()
        assert data["bits"] == 2
        assert "Z" in data["proof"]["commitments"]

        stored = client.get(f"/lookup/proofs/{data['id']}")
        assert stored.status_code == 200
        assert stored.get_json() == data

    def test_vector_with_selectors(self, client):
        resp = _prove(client, f=[[5, 1], [6, 2]], t=[[1, 9], [2, 9]],
                      sel_f=[0, 1], sel_t=[1, 0])
        assert resp.status_code == 201
        assert "selF" in resp.get_json()["proof"]["commitments"]

    def test_missing_fields(self, client):
        resp = client.post("/lookup/prove", json={"f": [1, 2]})
        assert resp.status_code == 400

    def test_not_power_of_two(self, client):
        resp = _prove(client, f=[1, 2, 3], t=[3, 2, 1])
        assert resp.status_code == 400
        assert "error" in resp.get_json()

    def test_domain_too_large(self, client):
        values = list(range(512))
        assert _prove(client, f=values, t=values).status_code == 400

    def test_zero_column(self, client):
        assert _prove(client, f=[0, 0, 0, 0], t=[0, 0, 0, 0]).status_code == 400

    def test_non_boolean_selector(self, client):
        assert _prove(client, sel_f=[2, 1, 1, 1]).status_code == 400

    def test_unknown_accumulator(self, client):
        assert _prove(client, accumulator="logup").status_code == 400

    def test_different_multisets(self, client):
        resp = _prove(client, t=[1, 2, 3, 5])
        assert resp.status_code == 422

    def test_unknown_proof(self, client):
        assert client.get("/lookup/proofs/nope").status_code == 404


class TestVerify:

    def test_verify_by_id(self, client):
        proof_id = _prove(client).get_json()["id"]
        resp = client.post("/lookup/verify", json={"id": proof_id})
        assert resp.status_code == 200
        assert resp.get_json() == {"valid": True}

    def test_verify_inline_tampered(self, client):
        data = _prove(client).get_json()
        evals = data["proof"]["evaluations"]
        evals["fxi"] = serialize_fr(deserialize_fr(evals["fxi"]) + FR(1))
        resp = client.post("/lookup/verify", json={"proof": data["proof"], "bits": 2})
        assert resp.get_json() == {"valid": False}

    def test_verify_unknown_id(self, client):
        assert client.post("/lookup/verify", json={"id": "nope"}).status_code == 404

    def test_verify_bad_bits(self, client):
        data = _prove(client).get_json()
        resp = client.post("/lookup/verify", json={"proof": data["proof"], "bits": 99})
        assert resp.status_code == 400

    def test_verify_malformed_proof(self, client):
        resp = client.post("/lookup/verify", json={"proof": {"commitments": 1}, "bits": 2})
        assert resp.status_code == 400

    def test_clear(self, client):
        proof_id = _prove(client).get_json()["id"]
        assert client.post("/lookup/proofs/clear").get_json() == {"cleared": True}
        assert client.get(f"/lookup/proofs/{proof_id}").status_code == 404
