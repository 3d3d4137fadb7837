"""Effect instance models.

An effect instance is the runtime record of an effect applied to a
character. It points at the effect's source document, tracks duration and
permanence, and carries the executed flag of its optional one-shot action:

    Pending (executed=False, action defined) -> Executed (executed=True)

The flag persists across recompute passes so a one-shot action fires at most
once over the lifetime of the instance.
"""

from __future__ import annotations

import re
from datetime import date, datetime, timedelta
from typing import Self
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from rpg_sheet.models.enums import OneShotStatus
from rpg_sheet.models.fields import FieldValue, Record, Text, as_int, as_text


_INLINE_ACTION = re.compile(r"^\s*(\w+)\s*[: ]\s*(.+?)\s*$")


def _as_date(moment: date | datetime) -> date:
    """Reduce a datetime to its calendar date."""
    return moment.date() if isinstance(moment, datetime) else moment


class EffectAction(BaseModel):
    """A one-shot action carried by an effect.

    Attributes:
        type: Action kind ('heal', 'tempHeal', 'damage'); unknown kinds are
            kept verbatim so they can be reported.
        amount: Fixed amount or a dice expression such as '2d6+1'.
        attack_bonus: When set, a damage action first rolls d20 plus this
            bonus against the character's AC.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    type: str = Field(min_length=1, description="Action kind")
    amount: int | str = Field(default=0, description="Amount or dice expression")
    attack_bonus: int | None = Field(default=None, description="Attack roll bonus")

    @classmethod
    def from_field(cls, value: FieldValue | None) -> Self | None:
        """Build an action from an authored ``action`` field.

        Accepts a record ``{type, amount, attackBonus}`` or inline text such
        as ``"heal 10"`` / ``"damage: 2d6"``.

        Returns:
            The parsed action, or None if the field cannot describe one.
        """
        if isinstance(value, Record):
            action_type = as_text(value.get("type"))
            if action_type is None:
                return None
            raw_amount = value.get("amount")
            amount: int | str | None = as_int(raw_amount)
            if amount is None:
                amount = as_text(raw_amount) or 0
            return cls(
                type=action_type,
                amount=amount,
                attack_bonus=as_int(value.get("attackBonus")),
            )
        if isinstance(value, Text):
            match = _INLINE_ACTION.match(value.value)
            if match is None:
                action_type = as_text(value)
                return cls(type=action_type) if action_type else None
            raw = match.group(2)
            return cls(type=match.group(1), amount=int(raw) if raw.lstrip("+-").isdigit() else raw)
        return None


class EffectInstance(BaseModel):
    """Runtime record of an effect applied to a character.

    Attributes:
        id: Unique instance identifier.
        source_path: Path of the effect's source document.
        start_date: Day the effect was applied.
        duration_days: Number of days the effect lasts.
        permanent: Permanent effects never expire.
        active: Inactive instances are ignored without being deleted.
        executed: Whether the one-shot action has fired.
        action: Optional one-shot action overriding the document's own.
    """

    model_config = ConfigDict(validate_assignment=True, extra="ignore")

    id: str = Field(default_factory=lambda: uuid4().hex, description="Instance ID")
    source_path: str = Field(min_length=1, description="Effect document path")
    start_date: date | None = Field(default=None, description="Day applied")
    duration_days: int | None = Field(default=None, ge=0, description="Duration in days")
    permanent: bool = Field(default=False, description="Never expires")
    active: bool = Field(default=True, description="Considered by the engine")
    executed: bool = Field(default=False, description="One-shot action has fired")
    action: EffectAction | None = Field(default=None, description="One-shot action")

    @property
    def expires_on(self) -> date | None:
        """Day on which the effect stops applying, or None if it never does."""
        if self.permanent or self.start_date is None or self.duration_days is None:
            return None
        return self.start_date + timedelta(days=self.duration_days)

    def is_expired(self, now: date | datetime) -> bool:
        """Check whether the effect's duration has run out."""
        expires_on = self.expires_on
        return expires_on is not None and _as_date(now) >= expires_on

    def is_in_effect(self, now: date | datetime) -> bool:
        """Check whether the instance is active and not expired."""
        return self.active and not self.is_expired(now)

    def days_remaining(self, now: date | datetime) -> int | None:
        """Days left before expiry, or None for effects that never expire."""
        expires_on = self.expires_on
        if expires_on is None:
            return None
        return max(0, (expires_on - _as_date(now)).days)

    @property
    def status(self) -> OneShotStatus:
        """One-shot status based on the instance's own action override."""
        if self.executed:
            return OneShotStatus.EXECUTED
        if self.action is not None:
            return OneShotStatus.PENDING
        return OneShotStatus.NO_ACTION


__all__ = [
    "EffectAction",
    "EffectInstance",
]
