"""Flask REST API exposing the finance tracker ledger."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from finance_core.currency import CURRENCY_FORMATS, DEFAULT_CURRENCY
from finance_core.exceptions import ConflictError, PersistenceError, ValidationError
from finance_core.export import export_filename, transactions_to_csv
from finance_core.ledger import Ledger
from finance_core.storage import JSONStorage


def create_app(data_dir: Optional[Path] = None, ledger: Optional[Ledger] = None) -> Flask:
    app = Flask(__name__)

    env_name = os.getenv("FINANCE_TRACKER_ENV", "prod").lower()
    if env_name in {"dev", "development"}:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    else:
        allowed_origins = os.getenv("FINANCE_TRACKER_ALLOWED_ORIGINS")
        if allowed_origins:
            origins = [origin.strip() for origin in allowed_origins.split(",") if origin.strip()]
            CORS(app, resources={r"/*": {"origins": origins}}, supports_credentials=True)
        else:
            CORS(app)

    if ledger is None:
        storage = JSONStorage(Path(data_dir or os.getenv("FINANCE_TRACKER_DATA_DIR", "data")))
        ledger = Ledger(
            storage, default_currency=os.getenv("FINANCE_TRACKER_CURRENCY", DEFAULT_CURRENCY)
        )
    app.extensions["ledger"] = ledger

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(ConflictError)
    def handle_conflict(exc: ConflictError):
        return _handle_error(exc, 409, "Conflict")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    def _require(payload: Dict[str, Any], *fields: str) -> None:
        missing = [name for name in fields if payload.get(name) in (None, "")]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")

    def _transaction_view(transaction) -> Dict[str, Any]:
        data = transaction.to_dict()
        data["amount"] = f"{transaction.amount:.2f}"
        data["category"] = ledger.category_name(transaction.category_id)
        data["formatted_amount"] = ledger.format_amount(transaction.amount)
        return data

    @app.get("/categories")
    def list_categories():
        return _success({"items": [category.to_dict() for category in ledger.categories]})

    @app.post("/categories")
    def create_category():
        payload = _json_body()
        _require(payload, "name", "type")
        category = ledger.add_category(payload["name"], payload["type"])
        return _success(category.to_dict(), 201)

    @app.delete("/categories/<int:category_id>")
    def delete_category(category_id: int):
        ledger.delete_category(category_id)
        return _success({}, 204)

    @app.get("/transactions")
    def list_transactions():
        transactions = ledger.filter_transactions(
            type=request.args.get("type"),
            category=request.args.get("category"),
            start=request.args.get("start"),
            end=request.args.get("end"),
        )
        return _success({"items": [_transaction_view(t) for t in transactions]})

    @app.post("/transactions")
    def create_transaction():
        payload = _json_body()
        _require(payload, "type", "amount", "date", "categoryId")
        transaction = ledger.add_transaction(
            payload["type"],
            payload["amount"],
            payload["date"],
            payload["categoryId"],
            payload.get("notes"),
        )
        return _success(_transaction_view(transaction), 201)

    @app.delete("/transactions/<int:transaction_id>")
    def delete_transaction(transaction_id: int):
        ledger.delete_transaction(transaction_id)
        return _success({}, 204)

    @app.get("/summary")
    def summary():
        totals = ledger.compute_summary()
        payload = totals.to_dict()
        payload["currency"] = ledger.currency
        payload["formatted"] = {
            "total_income": ledger.format_amount(totals.total_income),
            "total_expenses": ledger.format_amount(totals.total_expenses),
            "balance": ledger.format_amount(totals.balance),
        }
        return _success(payload)

    @app.get("/monthly")
    def monthly():
        series = ledger.compute_monthly_series()
        return _success({"items": [month.to_dict() for month in series]})

    @app.get("/currency")
    def get_currency():
        return _success(CURRENCY_FORMATS[ledger.currency].to_dict())

    @app.put("/currency")
    def update_currency():
        payload = _json_body()
        _require(payload, "currency")
        code = ledger.set_currency(payload["currency"])
        return _success(CURRENCY_FORMATS[code].to_dict())

    @app.get("/currencies")
    def list_currencies():
        return _success({"items": [fmt.to_dict() for fmt in CURRENCY_FORMATS.values()]})

    @app.get("/export")
    def export_csv():
        filename = export_filename(ledger.currency)
        return Response(
            transactions_to_csv(ledger),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.post("/reset")
    def reset():
        ledger.clear_all()
        return _success({"categories": [category.to_dict() for category in ledger.categories]})

    return app
