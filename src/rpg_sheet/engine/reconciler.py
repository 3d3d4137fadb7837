"""Current-HP reconciliation against the max-HP high-water mark.

When max HP rises between passes the character is healed by exactly the
increase; when it falls below current HP, current HP is clamped. The mark is
then moved to the new max, so a new HP bonus heals once no matter how many
passes follow.
"""

from __future__ import annotations

from rpg_sheet.core.logging import get_logger
from rpg_sheet.models.state import HealthBlock


logger = get_logger(__name__)


def reconcile_health(
    health: HealthBlock,
    *,
    last_max_hp: int | None,
    current_hp: int | None,
) -> None:
    """Set current HP from the previous pass's values.

    Args:
        health: Health block with the new max HP.
        last_max_hp: Max HP of the previous pass; None on first-ever load,
            which skips the heal.
        current_hp: Current HP of the previous pass; None means full.
    """
    new_max = health.max_hp

    if last_max_hp is None:
        health.current_hp = new_max if current_hp is None else min(current_hp, new_max)
    else:
        current = last_max_hp if current_hp is None else current_hp
        if new_max > last_max_hp:
            current = min(current + (new_max - last_max_hp), new_max)
            logger.info("Max HP increased", old_max=last_max_hp, new_max=new_max, current_hp=current)
        elif new_max < current:
            current = new_max
            logger.info("Current HP clamped", old_max=last_max_hp, new_max=new_max)
        health.current_hp = max(0, current)

    health.last_max_hp = new_max


__all__ = ["reconcile_health"]
