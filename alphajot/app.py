"""
Alphajot - AI greeting cards.
Flask app serving the card form, card creation and email confirmation.
"""
import logging

from flask import Flask, send_from_directory
from flask_cors import CORS
from .card_maker import CardServices, FAILURE_PAGE, MessageGenerationError, confirm_card, create_card
from .settings import CardSettings

logger = logging.getLogger("alphajot")


def create_app(settings=None, services=None):
    settings = settings or (services.settings if services else CardSettings.from_env())
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    app = Flask(__name__, static_folder="static", static_url_path="")
    CORS(app, supports_credentials=False)
    app.extensions["alphajot"] = services or CardServices.from_settings(settings)

    @app.route("/")
    def index():
        return send_from_directory(app.static_folder, "index.html")

    @app.route("/CreateCard", methods=["POST"])
    def create_card_route():
        return create_card()

    @app.route("/ConfirmCard", methods=["POST"])
    def confirm_card_route():
        return confirm_card()

    @app.errorhandler(MessageGenerationError)
    def message_failed(e):
        logger.exception("Card message generation failed: %s", e)
        resp = send_from_directory(app.static_folder, FAILURE_PAGE)
        resp.status_code = 502
        return resp

    return app


if __name__ == "__main__":
    settings = CardSettings.from_env()
    app = create_app(settings)
    logger.info("Alphajot server running on port %s...", settings.port)
    app.run(host="0.0.0.0", port=settings.port)
