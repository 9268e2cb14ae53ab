from flask import Flask, jsonify

from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from lookup_kzg.config import load_settings
from lookup_routes import lookup_bp, init_lookup_bp


def create_app(config=None):
    """Flask 앱을 만든다.

    config로 LOOKUP_KZG_DB를 None으로 주면 메모리 DB를 사용한다 (테스트용).
    """
    settings = load_settings()

    app = Flask(__name__)
    app.secret_key = "key"
    app.config.update(
        LOOKUP_KZG_PTAU=settings["ptau"],
        LOOKUP_KZG_SEED=settings["seed"],
        LOOKUP_KZG_DB=settings["db"],
    )
    if config:
        app.config.update(config)

    if app.config["LOOKUP_KZG_DB"] is None:
        db = TinyDB(storage=MemoryStorage)     # Memory DB
    else:
        db = TinyDB(app.config["LOOKUP_KZG_DB"])  # Storage DB
    app.extensions["lookup_db"] = db

    init_lookup_bp(db.table("lookup"))
    app.register_blueprint(lookup_bp)

    @app.route("/")
    def index():
        return jsonify({
            "service": "lookup-kzg",
            "endpoints": [
                "POST /lookup/prove",
                "GET /lookup/proofs/<id>",
                "POST /lookup/verify",
                "POST /lookup/proofs/clear",
            ],
        })

    return app


if __name__ == "__main__":
    create_app().run(debug=True)
