"""Canonical trip snapshot schema handed in by the trip-management layer.

This is the single input shape the core accepts. Amounts arrive as decimal
major units and are converted to exact Money here, at the boundary.
"""

import logging
from datetime import datetime
from decimal import Decimal
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from .exceptions import SnapshotError
from .ledger import Ledger
from .models import ExpenseCategory, ExpenseRecord, Member, Split
from .money import Money

logger = logging.getLogger(__name__)


class SplitSnapshot(BaseModel):
    """A stored split, amount in major units."""

    member_id: str
    amount: Decimal


class ExpenseSnapshot(BaseModel):
    """A stored expense, amounts in major units."""

    id: str
    payer_id: str
    amount: Decimal
    category: str | None = None
    description: str = ""
    created_at: datetime
    splits: list[SplitSnapshot]

    def to_record(self) -> ExpenseRecord:
        """
        Convert to a core expense record.

        Raises:
            InvalidAmountError: If an amount is not positive or has sub-cent precision
            EmptyParticipantsError: If the expense has no splits
            DuplicateParticipantError: If a member has more than one split
            SplitMismatchError: If the stored splits don't cover the amount
        """
        return ExpenseRecord(
            id=self.id,
            payer_id=self.payer_id,
            amount=Money.from_decimal(self.amount),
            category=self.category or ExpenseCategory.OTHER.value,
            description=self.description,
            created_at=self.created_at,
            splits=[
                Split(member_id=split.member_id, amount=Money.from_decimal(split.amount))
                for split in self.splits
            ],
        )


class TripSnapshot(BaseModel):
    """Members and expenses of one trip at a point in time."""

    trip_id: str
    members: list[Member]
    expenses: list[ExpenseSnapshot] = Field(default_factory=list)

    def active_members(self) -> list[Member]:
        return [member for member in self.members if member.is_active]

    def to_ledger(self) -> Ledger:
        return Ledger(expenses=tuple(expense.to_record() for expense in self.expenses))

    def member_names(self) -> dict[str, str]:
        return {member.id: member.display_name for member in self.members}


def load_snapshot(path: Path) -> TripSnapshot:
    """
    Load a trip snapshot from a JSON file.

    Raises:
        SnapshotError: If the file can't be read or doesn't match the schema
    """
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SnapshotError(f"Could not read snapshot {path}: {e}") from e

    try:
        snapshot = TripSnapshot.model_validate_json(raw)
    except ValidationError as e:
        raise SnapshotError(f"Snapshot {path} does not match the trip schema:\n{e}") from e

    logger.info(
        f"Loaded trip {snapshot.trip_id}: {len(snapshot.members)} members, "
        f"{len(snapshot.expenses)} expenses"
    )
    return snapshot
