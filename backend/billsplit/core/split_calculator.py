"""
Split Calculator - expense shares, net balances and settlement suggestions.

Responsibilities:
- Divide one expense among participants (equal / percentage / custom)
- Fold an event's expenses into a net balance per participant
- Suggest the transfers that bring every balance back to zero

Everything here is a pure function of its inputs: no database access, no
mutation of the records passed in. Malformed records degrade to "contributes
nothing" instead of raising, so one bad expense can't break an event summary.

Amounts are plain floats. Equal splits are not rounded to the cent, so shares
may carry a few ULPs of error; the settlement tolerance absorbs it.
"""
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, asdict
from typing import Optional, Dict, Any, List, Union

from billsplit.utils.enums import ParticipantStatus, SplitType
from billsplit.utils.validators import to_amount


# Balances within one cent of zero count as settled
SETTLEMENT_EPSILON = 0.01


@dataclass(frozen=True)
class ExpenseShare:
    """What one participant owes for a single expense."""
    user_id: str
    amount: float
    percentage: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class Settlement:
    """A suggested payment from a debtor to a creditor."""
    from_user_id: str
    to_user_id: str
    amount: float

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SplitCalculator:
    """Pure split and settlement computations for one event."""

    @staticmethod
    def calculate_expense_shares(
        total_amount: float,
        split_type: Union[SplitType, str],
        participant_ids: Sequence[str],
        custom_shares: Optional[Mapping[str, float]] = None
    ) -> List[ExpenseShare]:
        """
        Calculate each participant's share of one expense.

        Args:
            total_amount: Expense total, must be positive and finite
            split_type: equal, percentage or custom
            participant_ids: Participants the expense is split across
            custom_shares: {user_id: percentage} for percentage splits,
                {user_id: amount} for custom splits

        Returns:
            Shares in participant_ids order. Empty when there is nothing to
            split: no participants, a bad total, an unknown split type, or
            a percentage/custom split without custom_shares. Participants
            missing from custom_shares get no share.
        """
        total = to_amount(total_amount)
        if total is None or total <= 0 or not participant_ids:
            return []

        try:
            split = SplitType(split_type)
        except ValueError:
            return []

        if split == SplitType.EQUAL:
            n = len(participant_ids)
            share_amount = total / n
            return [
                ExpenseShare(user_id, share_amount, 100.0 / n)
                for user_id in participant_ids
            ]

        if not isinstance(custom_shares, Mapping) or not custom_shares:
            return []

        shares = []
        for user_id in participant_ids:
            if user_id not in custom_shares:
                continue
            value = to_amount(custom_shares[user_id])
            if value is None:
                continue

            if split == SplitType.PERCENTAGE:
                shares.append(ExpenseShare(user_id, total * value / 100.0, value))
            else:
                shares.append(ExpenseShare(user_id, value, value / total * 100.0))

        return shares

    @staticmethod
    def participant_ids(participants: Sequence[Mapping[str, Any]]) -> List[str]:
        """
        Tracked participant ids, in input order.

        Records without a user_id, or with a status other than active, are
        ignored. Duplicate ids are collapsed.
        """
        ids = []
        seen = set()
        for participant in participants or []:
            user_id = participant.get("user_id")
            if user_id is None:
                continue
            status = participant.get("status") or ParticipantStatus.ACTIVE
            if status != ParticipantStatus.ACTIVE:
                continue
            user_id = str(user_id)
            if user_id not in seen:
                seen.add(user_id)
                ids.append(user_id)
        return ids

    @classmethod
    def calculate_user_balances(
        cls,
        expenses: Sequence[Mapping[str, Any]],
        participants: Sequence[Mapping[str, Any]]
    ) -> Dict[str, float]:
        """
        Net balance per participant for one event.

        Positive balance = the group owes them.
        Negative balance = they owe the group.

        Every expense is split across the full participant list. Credits to a
        payer, or debits to a share holder, who is not a tracked participant
        are dropped.
        """
        participant_ids = cls.participant_ids(participants)
        balances = {user_id: 0.0 for user_id in participant_ids}

        if not participant_ids:
            return balances

        for expense in expenses or []:
            payer_id = expense.get("payer_id")
            amount = to_amount(expense.get("amount"))
            if payer_id is None or amount is None or amount <= 0:
                continue  # malformed record

            shares = cls.calculate_expense_shares(
                amount,
                expense.get("split_type") or SplitType.EQUAL,
                participant_ids,
                expense.get("custom_shares")
            )

            payer_id = str(payer_id)
            if payer_id in balances:
                balances[payer_id] += amount

            for share in shares:
                if share.user_id in balances:
                    balances[share.user_id] -= share.amount

        return balances

    @staticmethod
    def optimize_settlements(
        balances: Mapping[str, float],
        epsilon: float = SETTLEMENT_EPSILON
    ) -> List[Settlement]:
        """
        Greedy debt matching: the largest debtor pays the largest creditor.

        Emits at most n - 1 transfers for n unsettled participants. Ties in
        magnitude are broken by user id so the output is deterministic.
        This is a heuristic; it does not guarantee the global minimum number
        of transfers.
        """
        debtors = []
        creditors = []

        for user_id, balance in (balances or {}).items():
            if balance < -epsilon:
                debtors.append([user_id, -balance])
            elif balance > epsilon:
                creditors.append([user_id, balance])

        debtors.sort(key=lambda d: (-d[1], d[0]))
        creditors.sort(key=lambda c: (-c[1], c[0]))

        settlements = []
        i = j = 0
        while i < len(debtors) and j < len(creditors):
            debtor = debtors[i]
            creditor = creditors[j]

            amount = min(debtor[1], creditor[1])
            settlements.append(Settlement(debtor[0], creditor[0], amount))

            debtor[1] -= amount
            creditor[1] -= amount

            if debtor[1] < epsilon:
                i += 1
            if creditor[1] < epsilon:
                j += 1

        return settlements

    @classmethod
    def calculate_event_settlements(
        cls,
        expenses: Sequence[Mapping[str, Any]],
        participants: Sequence[Mapping[str, Any]]
    ) -> List[Settlement]:
        """Suggested transfers that settle one event."""
        return cls.optimize_settlements(
            cls.calculate_user_balances(expenses, participants)
        )
