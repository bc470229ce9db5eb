"""Experience point rules."""


def completion_xp(
    xp_value: int,
    streak: int,
    multiplier: float = 0.1,
    max_bonus: float = 2.0,
) -> int:
    """
    XP earned for one completion, with a streak bonus.

    Each day of streak adds ``multiplier`` to the base, capped at
    ``max_bonus`` times the base.

    Examples:
        >>> completion_xp(10, 1)
        11
        >>> completion_xp(10, 50)
        20
    """
    bonus = min(1 + max(streak, 0) * multiplier, max_bonus)
    return round(xp_value * bonus)


def progress_ratio(total_xp: int, target_xp: int) -> float:
    """Fraction of the target reached, clamped to [0, 1]."""
    if target_xp <= 0:
        return 0.0
    return min(max(total_xp / target_xp, 0.0), 1.0)
