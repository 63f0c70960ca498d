import json

from agronomy.engine import RecommendationEngine
from agronomy.ledger.favorites_db import FavoritesLedger, merge_ledger_state
from agronomy.models import InvalidInput, SeriesLengthMismatch
from agronomy.utils.formatting import legend_name, request_rng, to_json_ready
from agronomy.utils.logger import logger

# CORS headers for API Gateway responses
CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type,X-User-Id",
}

# Knowledge tables are read-only, so one engine serves every invocation
engine = RecommendationEngine()

_ledger = None


def _get_ledger() -> FavoritesLedger:
    """Get or create the DynamoDB-backed ledger."""
    global _ledger
    if _ledger is None:
        _ledger = FavoritesLedger()
    return _ledger


def _response(status: int, body) -> dict:
    return {
        "statusCode": status,
        "headers": CORS_HEADERS,
        "body": json.dumps(body),
    }


def _parse_request(event: dict):
    """Return (method, path, params) for REST and HTTP API events."""
    method = event.get("httpMethod") or event.get("requestContext", {}).get("http", {}).get("method", "GET")
    path = event.get("path") or event.get("rawPath") or "/"
    params = dict(event.get("queryStringParameters") or {})
    if event.get("body"):
        body = json.loads(event["body"])
        if not isinstance(body, dict):
            raise ValueError("Request body must be a JSON object")
        params.update(body)
    return method.upper(), path.rstrip("/") or "/", params


def _text_param(params: dict, name: str) -> str:
    value = params.get(name)
    return "" if value is None else str(value)


def _conditions(params: dict) -> dict:
    # Free-text inputs; anything unmatched just yields no recommendations
    soil_type = _text_param(params, "soilType")
    season = _text_param(params, "season")
    location = _text_param(params, "location")
    rng = request_rng(soil_type, season, location, salt=str(params.get("salt", "")))
    records = engine.recommend_by_conditions(soil_type, season, location, rng=rng)
    return {"recommendations": to_json_ready(records), "count": len(records)}


def _soil(params: dict) -> dict:
    records = engine.recommend_by_reading(params)
    return {"recommendations": to_json_ready(records), "count": len(records)}


def _market_trends(params: dict) -> dict:
    days = int(params.get("days", engine.settings.trend_days))
    if not 0 <= days <= engine.settings.max_trend_days:
        raise ValueError(f"days must be between 0 and {engine.settings.max_trend_days}, got {days}")
    crops = params.get("crops") or []
    if isinstance(crops, str):
        crops = [c.strip() for c in crops.split(",") if c.strip()]

    if params.get("trends"):
        series = engine.adapt_trends(params)
    elif crops:
        series = engine.market_trends(crops, days)
    else:
        return {
            "trends": {},
            "chart": engine.fallback_chart(days),
            "legend": [legend_name(i) for i in range(3)],
            "simulated": True,
            "marketDrivers": None,
        }

    body = series.to_dict()
    body["chart"] = engine.chart_rows(series)
    body["legend"] = [legend_name(i, trends=series) for i in range(3)]
    return body


def _save_favorite(params: dict) -> tuple:
    user_id = params.get("userId")
    record = params.get("record")
    if not user_id or not isinstance(record, dict):
        return 400, {"error": "userId and record are required."}
    entry_id = _get_ledger().save(
        user_id,
        record,
        favorite=bool(params.get("favorite", False)),
        source=params.get("source", "conditions"),
        notes=params.get("notes", ""),
    )
    if entry_id is None:
        return 502, {"error": "Could not save recommendation."}
    return 201, {"entryId": entry_id}


def _list_favorites(params: dict) -> tuple:
    user_id = params.get("userId")
    if not user_id:
        return 400, {"error": "userId is required."}
    entries = _get_ledger().list_for_user(user_id)
    body = {"entries": entries}
    if isinstance(params.get("recommendations"), list):
        body["recommendations"] = merge_ledger_state(params["recommendations"], entries)
    return 200, body


def lambda_handler(event, context):
    logger.info(event)

    try:
        method, path, params = _parse_request(event)

        if path == "/recommendations/conditions" and method == "POST":
            return _response(200, _conditions(params))
        if path == "/recommendations/soil" and method == "POST":
            return _response(200, _soil(params))
        if path == "/market-trends" and method in ("GET", "POST"):
            return _response(200, _market_trends(params))
        if path == "/favorites" and method == "POST":
            return _response(*_save_favorite(params))
        if path == "/favorites" and method == "GET":
            return _response(*_list_favorites(params))

        return _response(404, {"error": f"No route for {method} {path}"})

    except InvalidInput as e:
        logger.warning(f"Rejected soil reading: {e}")
        return _response(400, {"error": str(e), "fields": e.fields})
    except (SeriesLengthMismatch, ValueError) as e:
        logger.warning(f"Bad request: {e}")
        return _response(400, {"error": str(e)})
    except Exception as e:
        logger.error(f"Error processing request: {e}")
        return _response(500, {"error": str(e)})
