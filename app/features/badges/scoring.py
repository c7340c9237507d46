"""Badge level and rarity derivation.

Both are pure functions of the review score (and, for rarity, the quest
difficulty) so a badge can always be re-derived from its blockchain payload.
"""

from __future__ import annotations

from typing import Optional, Tuple

from app.features.quests.schemas import QuestDifficulty
from .schemas import BadgeLevel, BadgeRarity

# Highest threshold wins.
LEVEL_THRESHOLDS: Tuple[Tuple[int, BadgeLevel], ...] = (
    (95, BadgeLevel.diamond),
    (90, BadgeLevel.platinum),
    (85, BadgeLevel.gold),
    (80, BadgeLevel.silver),
)

# First matching (difficulty, min score) rule wins; None matches any difficulty.
RARITY_RULES: Tuple[Tuple[Optional[QuestDifficulty], int, BadgeRarity], ...] = (
    (QuestDifficulty.expert, 95, BadgeRarity.legendary),
    (QuestDifficulty.expert, 90, BadgeRarity.epic),
    (QuestDifficulty.advanced, 95, BadgeRarity.epic),
    (QuestDifficulty.advanced, 90, BadgeRarity.rare),
    (None, 95, BadgeRarity.rare),
    (None, 90, BadgeRarity.uncommon),
)


def calculate_badge_level(score: int) -> BadgeLevel:
    for threshold, level in LEVEL_THRESHOLDS:
        if score >= threshold:
            return level
    return BadgeLevel.bronze


def calculate_badge_rarity(difficulty: QuestDifficulty | str, score: int) -> BadgeRarity:
    difficulty = QuestDifficulty(difficulty)
    for rule_difficulty, threshold, rarity in RARITY_RULES:
        if rule_difficulty is not None and rule_difficulty != difficulty:
            continue
        if score >= threshold:
            return rarity
    return BadgeRarity.common


__all__ = ["calculate_badge_level", "calculate_badge_rarity", "LEVEL_THRESHOLDS", "RARITY_RULES"]
