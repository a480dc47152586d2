"""Settlement routes - balances and who-pays-whom for events."""
from datetime import datetime
from flask import Blueprint, request, jsonify
from flask_jwt_extended import jwt_required, get_jwt_identity

from billsplit.core import SplitCalculator
from billsplit.settlements.services import SettlementService
from billsplit.utils.enums import SplitType
from billsplit.utils.validators import require_keys, safe_object_id

bp = Blueprint("settlements", __name__)


# ------------------ HELPERS ------------------

def error_response(message, status_code=400):
    return jsonify({
        "error": message,
        "status": status_code,
        "timestamp": datetime.utcnow().isoformat()
    }), status_code


def success_response(data, status_code=200):
    body = {"success": True, "timestamp": datetime.utcnow().isoformat()}
    body.update(data)
    return jsonify(body), status_code


def _list_field(payload, key):
    value = payload.get(key)
    if not isinstance(value, list):
        raise ValueError(f"{key} must be a list")
    return value


# ------------------ ROUTES ------------------

@bp.route("/shares", methods=["POST"])
def calculate_shares():
    """
    Split a single expense.

    Request body:
    {
        "amount": 100.0,
        "split_type": "equal|percentage|custom",
        "participant_ids": ["a", "b"],
        "custom_shares": {"a": 30, "b": 70}  // percentage or custom only
    }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return error_response("Request body must be a JSON object")
    try:
        require_keys(data, "amount", "participant_ids")
        participant_ids = [str(p) for p in _list_field(data, "participant_ids")]
        custom_shares = data.get("custom_shares") or {}
        if not isinstance(custom_shares, dict):
            raise ValueError("custom_shares must be an object")
    except ValueError as e:
        return error_response(str(e))

    shares = SplitCalculator.calculate_expense_shares(
        data["amount"],
        data.get("split_type") or SplitType.EQUAL,
        participant_ids,
        custom_shares
    )
    return success_response({"shares": [s.to_dict() for s in shares]})


@bp.route("/calculate", methods=["POST"])
def calculate():
    """
    Balances and settlements for caller-supplied data. Nothing is stored.

    Request body:
    {
        "expenses": [{"payer_id": "a", "amount": 90, "split_type": "equal"}],
        "participants": [{"user_id": "a", "status": "active"}, ...]
    }
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return error_response("Request body must be a JSON object")
    try:
        require_keys(data, "expenses", "participants")
        expenses = [e for e in _list_field(data, "expenses") if isinstance(e, dict)]
        participants = [p for p in _list_field(data, "participants") if isinstance(p, dict)]
    except ValueError as e:
        return error_response(str(e))

    try:
        summary = SettlementService.summarize(expenses, participants)
        return success_response(summary)
    except Exception as e:
        print(f"[Settlements] calculate failed: {e}")
        return error_response(f"Failed to calculate settlements: {e}", 500)


@bp.route("/events/<event_id>", methods=["GET"])
@jwt_required()
def get_event_settlements(event_id):
    """
    Balances and suggested settlements for a stored event.

    Positive balance = is owed money
    Negative balance = owes money
    """
    if safe_object_id(event_id) is None:
        return error_response("Invalid event ID format")

    user_id = get_jwt_identity()

    try:
        event = SettlementService.get_event(event_id)
        if not event:
            return error_response("Event not found", 404)

        if not SettlementService.can_view_event(event, user_id):
            return error_response("Access denied", 403)

        return success_response(SettlementService.summarize_event(event))
    except Exception as e:
        print(f"[Settlements] event {event_id} failed: {e}")
        return error_response(f"Failed to calculate settlements: {e}", 500)


@bp.route("/balance", methods=["GET"])
@jwt_required()
def get_my_balance():
    """Current user's net balance across every event they belong to."""
    user_id = get_jwt_identity()

    try:
        result = SettlementService.get_user_balance(user_id)
        return success_response(result)
    except Exception as e:
        print(f"[Settlements] balance for {user_id} failed: {e}")
        return error_response(f"Failed to get user balance: {e}", 500)
