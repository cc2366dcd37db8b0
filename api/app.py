"""Flask REST API exposing the expense ledger."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from flask import Flask, Response, jsonify, request
from flask_cors import CORS

from clarity.config import Settings
from clarity.controller import LedgerController
from clarity.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from clarity.exporter import EXPORT_FILENAME, EXPORT_MIMETYPE, to_delimited_text
from clarity.logging_config import setup_logging
from clarity.models import CATEGORIES, ExpenseDraft, FilterSpec
from clarity.queries import filtered, summarize, total_spent
from clarity.storage import BlobStore, FileBlobStore


def create_app(settings: Optional[Settings] = None, blobs: Optional[BlobStore] = None) -> Flask:
    settings = settings or Settings.from_env()
    setup_logging(settings.log_level)
    app = Flask(__name__)

    if settings.is_dev:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    elif settings.allowed_origins:
        CORS(app, resources={r"/*": {"origins": settings.allowed_origins}}, supports_credentials=True)
    else:
        CORS(app)

    ledger = LedgerController.open(
        blobs or FileBlobStore(settings.data_dir),
        notification_ttl=settings.notification_ttl,
    )
    service = ledger.service
    app.extensions["clarity.ledger"] = ledger

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str, **extra: Any):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc), **extra}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error", code=exc.code)

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Record not found")

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

    def _filter_spec() -> FilterSpec:
        return FilterSpec.from_params(
            {key: request.args.get(key) for key in ("search", "category", "from", "to")}
        )

    @app.get("/categories")
    def list_categories():
        return _success({"items": list(CATEGORIES)})

    @app.get("/expenses")
    def list_expenses():
        rows = filtered(service.records, _filter_spec())
        return _success({
            "items": [expense.to_dict() for expense in rows],
            "count": len(rows),
            "total": f"{total_spent(rows):.2f}",
        })

    @app.post("/expenses")
    def create_expense():
        expense = service.create(ExpenseDraft.from_dict(_json_body()))
        return _success(expense.to_dict(), 201)

    @app.get("/expenses/<expense_id>")
    def get_expense(expense_id: str):
        return _success(service.get(expense_id).to_dict())

    @app.put("/expenses/<expense_id>")
    def update_expense(expense_id: str):
        expense = service.update(expense_id, ExpenseDraft.from_dict(_json_body()))
        if expense is None:
            return _success({}, 204)
        return _success(expense.to_dict())

    @app.delete("/expenses/<expense_id>")
    def delete_expense(expense_id: str):
        service.delete(expense_id)
        return _success({}, 204)

    @app.get("/summary")
    def summary():
        today = request.args.get("today")
        try:
            as_of = date.fromisoformat(today) if today else date.today()
        except ValueError as exc:
            raise ValidationError("today must be a YYYY-MM-DD date") from exc
        return _success(summarize(service.records, as_of).to_dict())

    @app.get("/export")
    def export_csv():
        if not service.records:
            return _success({"error": "Nothing to export"}, 404)
        text = to_delimited_text(filtered(service.records, _filter_spec()))
        if text is None:
            return _success({"error": "Nothing to export"}, 404)
        return Response(
            text,
            mimetype=EXPORT_MIMETYPE,
            headers={"Content-Disposition": f"attachment; filename={EXPORT_FILENAME}"},
        )

    return app
