# thin http surface over the aggregator: GET /weather/<city>

from __future__ import annotations
import json
import time
from flask import Flask, Response
from .client import ProviderError
from .service import Aggregator


def format_duration(seconds: float) -> str:
    # human readable, picks the largest unit that keeps the rounded number >= 1
    for unit, scale in (("s", 1), ("ms", 1e3), ("µs", 1e6)):
        value = round(seconds * scale, 3)
        if value >= 1 or unit == "µs":
            return (f"{value:.3f}".rstrip("0").rstrip(".") or "0") + unit


def create_app(aggregator: Aggregator) -> Flask:
    app = Flask(__name__)

    # path converter keeps slashes, the city is everything after /weather/
    @app.route("/weather/<path:city>", methods=["GET"])
    def weather(city: str):
        begin = time.perf_counter()
        try:
            temp = aggregator.temperature(city)
        except ProviderError as exc:
            return Response(str(exc), status=500, mimetype="text/plain")

        body = {"city": city, "temp": temp, "took": format_duration(time.perf_counter() - begin)}
        return Response(
            json.dumps(body) + "\n",
            status=200,
            content_type="application/json; charset=utf-8",
        )

    return app
