"""Settlement service - loads event data and runs the split calculator over it."""
from typing import List, Dict, Any, Optional, Tuple

from billsplit.core import SplitCalculator
from billsplit.extensions import db as mongo
from billsplit.utils.enums import ParticipantStatus, SplitType
from billsplit.utils.validators import safe_object_id


class SettlementService:
    """Read-only bridge between MongoDB records and SplitCalculator."""

    @staticmethod
    def expense_record(doc: Dict[str, Any]) -> Dict[str, Any]:
        """Map a stored expense document to the shape SplitCalculator reads."""
        payer_id = doc.get("payer_id")
        split_details = doc.get("split_details")
        if not isinstance(split_details, dict):
            split_details = {}
        return {
            "id": str(doc["_id"]) if doc.get("_id") is not None else None,
            "payer_id": str(payer_id) if payer_id is not None else None,
            "amount": doc.get("amount"),
            "split_type": doc.get("split_type") or SplitType.EQUAL.value,
            "custom_shares": {str(k): v for k, v in split_details.items()},
        }

    @staticmethod
    def with_creator(participants: List[Dict[str, Any]], creator_id) -> List[Dict[str, Any]]:
        """
        Return participants with the event creator added as an active member.

        Creators take part in every split of their event even without a
        participant record. The input list is not modified.
        """
        if creator_id is None:
            return list(participants)

        creator_id = str(creator_id)
        if any(p.get("user_id") == creator_id for p in participants):
            return list(participants)

        return list(participants) + [{
            "user_id": creator_id,
            "status": ParticipantStatus.ACTIVE.value
        }]

    @staticmethod
    def get_event(event_id: str) -> Optional[Dict]:
        oid = safe_object_id(event_id)
        if oid is None:
            return None
        return mongo.events.find_one({"_id": oid})

    @classmethod
    def load_event_inputs(
        cls,
        event_id: str
    ) -> Tuple[Optional[Dict], List[Dict[str, Any]], List[Dict[str, Any]]]:
        """
        Fetch one event's expenses and active participants.

        Returns:
            Tuple of (event document or None, expense records, participant records)
        """
        event = cls.get_event(event_id)
        if not event:
            return None, [], []

        expenses, participants = cls.event_inputs(event)
        return event, expenses, participants

    @classmethod
    def event_inputs(cls, event: Dict) -> Tuple[List[Dict[str, Any]], List[Dict[str, Any]]]:
        """Expense and participant records for an already loaded event."""
        oid = event["_id"]
        participants = [
            {"user_id": str(p["user_id"]), "status": p.get("status", ParticipantStatus.ACTIVE.value)}
            for p in mongo.participants.find(
                {"event_id": oid, "status": ParticipantStatus.ACTIVE.value}
            )
        ]
        participants = cls.with_creator(participants, event.get("creator_id"))

        expenses = [cls.expense_record(doc) for doc in mongo.expenses.find({"event_id": oid})]

        return expenses, participants

    @staticmethod
    def can_view_event(event: Optional[Dict], user_id: str) -> bool:
        """Creators and active participants may see an event's settlements."""
        user_oid = safe_object_id(user_id)
        if not event or user_oid is None:
            return False

        if str(event.get("creator_id")) == str(user_oid):
            return True

        return mongo.participants.find_one({
            "event_id": event["_id"],
            "user_id": user_oid,
            "status": ParticipantStatus.ACTIVE.value
        }) is not None

    @staticmethod
    def summarize(expenses: List[Dict[str, Any]], participants: List[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Balances and suggested settlements, rounded to cents for display.

        Returns:
        {
            "balances": {"<user_id>": 60.0, ...},
            "settlements": [{"from_user_id", "to_user_id", "amount"}],
            "total_to_settle": 60.0
        }
        """
        balances = SplitCalculator.calculate_user_balances(expenses, participants)
        settlements = SplitCalculator.optimize_settlements(balances)

        return {
            "balances": {user_id: round(b, 2) for user_id, b in balances.items()},
            "settlements": [
                {
                    "from_user_id": s.from_user_id,
                    "to_user_id": s.to_user_id,
                    "amount": round(s.amount, 2)
                }
                for s in settlements
            ],
            "total_to_settle": round(sum(s.amount for s in settlements), 2)
        }

    @classmethod
    def get_event_summary(cls, event_id: str) -> Tuple[Optional[Dict], Optional[str]]:
        """
        Settlement summary for one event.

        Returns:
            Tuple of (summary dict, error message)
        """
        event = cls.get_event(event_id)
        if event is None:
            return None, "Event not found"
        return cls.summarize_event(event), None

    @classmethod
    def summarize_event(cls, event: Dict) -> Dict[str, Any]:
        """Summary for an event document that has already been loaded."""
        expenses, participants = cls.event_inputs(event)
        summary = cls.summarize(expenses, participants)
        summary["event_id"] = str(event["_id"])
        summary["event_name"] = event.get("name", "")
        return summary

    @staticmethod
    def get_user_events(user_id: str) -> List[Dict]:
        """Events the user created or actively participates in."""
        user_oid = safe_object_id(user_id)
        if user_oid is None:
            return []

        events = {}
        for event in mongo.events.find({"creator_id": user_oid}):
            events[event["_id"]] = event

        joined_ids = [
            p["event_id"] for p in mongo.participants.find(
                {"user_id": user_oid, "status": ParticipantStatus.ACTIVE.value}
            )
            if p["event_id"] not in events
        ]
        if joined_ids:
            for event in mongo.events.find({"_id": {"$in": joined_ids}}):
                events[event["_id"]] = event

        return list(events.values())

    @classmethod
    def get_user_balance(cls, user_id: str) -> Dict[str, Any]:
        """
        User's net position summed across all their events.

        Returns:
        {
            "total_balance": -12.5,
            "event_balances": [{"event_id", "event_name", "balance"}]
        }
        """
        user_id = str(user_id)
        total = 0.0
        event_balances = []

        for event in cls.get_user_events(user_id):
            expenses, participants = cls.event_inputs(event)
            balances = SplitCalculator.calculate_user_balances(expenses, participants)

            if user_id not in balances:
                continue

            total += balances[user_id]
            event_balances.append({
                "event_id": str(event["_id"]),
                "event_name": event.get("name", ""),
                "balance": round(balances[user_id], 2)
            })

        return {
            "total_balance": round(total, 2),
            "event_balances": event_balances
        }
