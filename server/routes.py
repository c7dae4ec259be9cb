import logging
import sys
import time
from datetime import datetime

from flask import Flask, request, jsonify

from app import config
from app.config import DOMAINS, SERVER_FALLBACK_TEXTS, normalize_domain
from app.errors import GenerationError
from server import generator

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
PROVIDER = "groq"

logger = logging.getLogger(__name__)

app = Flask(__name__)


def _now_ms() -> int:
    return int(time.time() * 1000)


@app.after_request
def allow_any_origin(response):
    response.headers["Access-Control-Allow-Origin"] = "*"
    return response


@app.route("/")
def index():
    return jsonify({
        "message": "HippoType content generator",
        "model": config.GROQ_MODEL,
        "provider": PROVIDER,
        "status": "active",
        "timestamp": datetime.now().isoformat(),
    })


@app.route("/generate", methods=["GET"])
def generate():
    domain = normalize_domain(request.args.get("domain"))
    timestamp = _now_ms()
    try:
        result = generator.generate_practice_text(domain)
    except GenerationError as e:
        status, message = generator.classify_error(e)
        logger.error("Generation failed for %s: %s", domain, e)
        return jsonify({
            "error": message,
            "details": str(e),
            "fallback_text": SERVER_FALLBACK_TEXTS[domain],
            "model": config.GROQ_MODEL,
            "provider": PROVIDER,
            "timestamp": _now_ms(),
            "success": False,
        }), status

    return jsonify({
        "text": result.text,
        "domain": result.domain,
        "model": config.GROQ_MODEL,
        "provider": PROVIDER,
        "timestamp": timestamp,
        "length": len(result.text),
        "topic": result.topic,
        "success": True,
    })


@app.route("/test-model", methods=["GET"])
def test_model():
    messages = [{
        "role": "user",
        "content": "Write a single sentence about the benefits of fast AI inference.",
    }]
    try:
        reply = generator.request_completion(messages, temperature=0.7, max_tokens=50)
    except GenerationError as e:
        logger.error("Model test failed: %s", e)
        return jsonify({
            "success": False,
            "error": str(e),
            "model": config.GROQ_MODEL,
            "provider": PROVIDER,
            "timestamp": datetime.now().isoformat(),
        }), 500
    return jsonify({
        "success": True,
        "model": config.GROQ_MODEL,
        "provider": PROVIDER,
        "test_response": reply or "No response",
        "timestamp": datetime.now().isoformat(),
    })


@app.route("/info", methods=["GET"])
def info():
    return jsonify({
        "service": "HippoType AI Content Generator",
        "model": config.GROQ_MODEL,
        "provider": PROVIDER,
        "domains": list(DOMAINS),
        "endpoints": {
            "generate": "/generate?domain={" + "|".join(DOMAINS) + "}",
            "test": "/test-model",
            "info": "/info",
        },
    })


def main() -> int:
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT, stream=sys.stdout)
    if not config.GROQ_API_KEY:
        logger.error("GROQ_API_KEY is not set; get a key from https://console.groq.com/keys")
        return 1
    logger.info("Generator running at http://%s:%d", config.SERVER_HOST, config.SERVER_PORT)
    app.run(host=config.SERVER_HOST, port=config.SERVER_PORT)
    return 0


if __name__ == "__main__":
    sys.exit(main())
