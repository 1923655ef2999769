import logging

from flask import Flask, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import Settings, load_settings
from contract_gateway import ContractGateway
from controllers import GATEWAY_EXTENSION
from errors import ErrorCode
from routes import api

logger = logging.getLogger(__name__)

API_PREFIX = "/api"

_HTTP_ERROR_CODES = {
    404: ErrorCode.NOT_FOUND,
    405: ErrorCode.METHOD_NOT_ALLOWED,
    400: ErrorCode.INVALID_FIELD,
}


def configure_logging(settings: Settings | None) -> None:
    production = settings is not None and settings.is_production
    logging.basicConfig(
        level=logging.INFO if production else logging.DEBUG,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Settings | None = None, gateway=None) -> Flask:
    """Build the API application.

    ``gateway`` may be any object exposing the ContractGateway methods;
    when omitted one is built from ``settings`` (or the environment).
    """
    if gateway is None:
        settings = settings or load_settings()
        gateway = ContractGateway(settings)

    app = Flask(__name__)
    app.config["PRODUCTION"] = bool(settings and settings.is_production)
    app.json.sort_keys = False
    CORS(app)

    app.extensions[GATEWAY_EXTENSION] = gateway
    app.register_blueprint(api, url_prefix=API_PREFIX)

    @app.errorhandler(HTTPException)
    def http_error(exc: HTTPException):
        code = _HTTP_ERROR_CODES.get(exc.code or 500, ErrorCode.INTERNAL)
        return jsonify({"error": exc.description, "code": code.value}), exc.code

    @app.route("/health")
    def health():
        try:
            connected = bool(gateway.is_connected())
            chain_error = None
        except Exception as exc:  # noqa: BLE001
            connected = False
            chain_error = str(exc)
        return jsonify(
            {
                "status": "ok",
                "blockchain_client": "ready" if connected else "unavailable",
                "blockchain_error": chain_error,
            }
        )

    return app


def main() -> None:
    settings = load_settings()
    configure_logging(settings)
    app = create_app(settings)
    if settings.is_production:
        logger.info("VoteX backend started on port %s", settings.port)
    else:
        logger.info("Backend running on http://localhost:%s", settings.port)
    app.run(host="0.0.0.0", port=settings.port, debug=not settings.is_production)


if __name__ == "__main__":
    main()
