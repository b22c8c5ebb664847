from __future__ import annotations

import json
import logging
import queue
from typing import Iterator

from flask import Flask, Response, jsonify, request

from ..container import Container
from ..core.constants import (
    COLLECTION_ATTENDANCE,
    COLLECTION_LEAVE_BALANCE,
    COLLECTION_LEAVES,
    COLLECTION_SALARY,
    COLLECTION_SALARY_CONFIG,
)
from ..core.exceptions import ValidationError
from .validators import require_int

logger = logging.getLogger(__name__)

STREAM_COLLECTIONS = {
    COLLECTION_ATTENDANCE,
    COLLECTION_LEAVES,
    COLLECTION_LEAVE_BALANCE,
    COLLECTION_SALARY,
    COLLECTION_SALARY_CONFIG,
}

KEEPALIVE_SECONDS = 15.0


def sse_event(collection: str, document) -> str:
    payload = document.to_dict() if hasattr(document, "to_dict") else document
    return f"event: {collection}\ndata: {json.dumps(payload)}\n\n"


def register(app: Flask, container: Container) -> None:
    @app.route("/api/stream/<collection>", methods=["GET"], endpoint="api_stream")
    def api_stream(collection: str):
        """Server-sent events for writes to one collection, optionally for one user."""
        if collection not in STREAM_COLLECTIONS:
            return jsonify({"error": f"Unknown collection: {collection}"}), 404

        where = None
        if request.args.get("userId"):
            try:
                user_id = require_int(request.args["userId"], "userId")
            except ValidationError as e:
                return jsonify({"error": str(e)}), 400

            def where(doc) -> bool:
                return getattr(doc, "user_id", None) == user_id

        events: queue.Queue = queue.Queue()
        unsubscribe = container.feed.subscribe(
            collection,
            lambda name, doc: events.put(sse_event(name, doc)),
            where=where,
        )

        def generate() -> Iterator[str]:
            try:
                yield ": connected\n\n"
                while True:
                    try:
                        yield events.get(timeout=KEEPALIVE_SECONDS)
                    except queue.Empty:
                        yield ": keep-alive\n\n"
            finally:
                unsubscribe()
                logger.debug("Stream subscriber for %s disconnected", collection)

        return Response(generate(), mimetype="text/event-stream", headers={"Cache-Control": "no-cache"})
