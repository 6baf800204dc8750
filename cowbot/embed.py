"""Rich message content and the level-up announcement."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from .ranking_models import LevelUp

ROLE_UPDATE_FAILED = "\n(We failed to update your roles; maybe we don't have permission?)"


@dataclass
class Embed:
    """A titled message card with optional fields, image, footer and timestamp."""

    title: str | None = None
    description: str | None = None
    fields: list[tuple[str, str, bool]] = field(default_factory=list)
    image: str | None = None
    footer: str | None = None
    timestamp: datetime | None = None

    def add_field(self, name, value, inline: bool = False) -> "Embed":
        """Append a field; values are rendered with ``str``. Returns the embed."""
        self.fields.append((str(name), str(value), inline))
        return self


def level_up_embed(user_id: int, level_up: LevelUp, role_update_failed: bool = False) -> Embed | None:
    """Build the level-up announcement, or ``None`` when nothing levelled up."""
    if level_up.level < 0:
        return None

    content = f"<@{user_id}> leveled up from {level_up.level - 1} to {level_up.level}."
    if level_up.new_rank is not None:
        content += f"\nYou are now a <@&{level_up.new_rank}>."
        if role_update_failed:
            content += ROLE_UPDATE_FAILED

    return Embed(title="Level Up!", description=content)