"""Flask service wrapper for the allocator."""

from typing import Any, Mapping, Optional

from flask import Flask, jsonify, request

from .engine import allocate
from .errors import AllocationError
from .logger import get_logger


def create_app(config: Mapping[str, Any], scorer: Optional[object] = None) -> Flask:
    app = Flask(__name__)

    @app.get("/health")
    def health() -> Any:
        return jsonify({"status": "ok"})

    @app.post("/allocate")
    def allocate_route() -> Any:
        logger = get_logger()
        logger.record_run_attempt("api")
        payload = request.get_json(force=True, silent=True)
        if not isinstance(payload, dict) or "input" not in payload:
            logger.record_run_failure("api", "BadRequest")
            return jsonify({"error": "Request body must be a JSON object with an 'input' field"}), 400
        try:
            result = allocate(payload["input"], config, scorer)
        except AllocationError as e:
            logger.record_run_failure("api", type(e).__name__)
            logger.warning("Allocation request rejected", error=str(e))
            return jsonify({"error": str(e)}), 400
        logger.record_run_success("api")
        return jsonify(result.to_dict())

    return app
