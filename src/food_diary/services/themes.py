"""Macro balance classification."""

from food_diary.domain.stats import DailyTotals
from food_diary.domain.themes import BALANCED_ADVICE, Theme, ThemeKind

PROTEIN_KCAL_PER_G = 4
CARBS_KCAL_PER_G = 4
FAT_KCAL_PER_G = 9

PROTEIN_SHARE_THRESHOLD = 0.30
FAT_SHARE_THRESHOLD = 0.40
CARBS_SHARE_THRESHOLD = 0.60


def classify(totals: DailyTotals) -> Theme:
    """Pick the theme for a day's totals.

    Checks run protein, then fat, then carbs; the first share above its
    threshold wins. A day with food but no dominant macro gets the default
    theme with the balanced advice.
    """
    if totals.food_entries == 0:
        return ThemeKind.DEFAULT.value

    p_cal = totals.p * PROTEIN_KCAL_PER_G
    c_cal = totals.c * CARBS_KCAL_PER_G
    f_cal = totals.f * FAT_KCAL_PER_G
    total_cal = p_cal + c_cal + f_cal

    if total_cal > 0:
        if p_cal / total_cal > PROTEIN_SHARE_THRESHOLD:
            return ThemeKind.PROTEIN_DOMINANT.value
        if f_cal / total_cal > FAT_SHARE_THRESHOLD:
            return ThemeKind.FAT_DOMINANT.value
        if c_cal / total_cal > CARBS_SHARE_THRESHOLD:
            return ThemeKind.CARB_DOMINANT.value

    return ThemeKind.DEFAULT.value.with_advice(BALANCED_ADVICE)
