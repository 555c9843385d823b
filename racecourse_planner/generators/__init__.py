"""Layout generation from discrete race committee choices.

Provides LayoutSettings, which turns five choices into a locus tree:
- shape -> start -> finish -> wind -> lee, each narrowing the next
- revalidate() resets invalid later choices to their first valid option
- all_settings() enumerates every valid combination
"""

from racecourse_planner.generators.layout_settings import (
    CourseShape,
    FinishLinePlacement,
    LayoutSettings,
    LeewardMarkOption,
    StartLinePlacement,
    WindMarkOption,
    all_settings,
    revalidate,
    valid_finishes,
    valid_lee_options,
    valid_starts,
    valid_wind_options,
)

__all__ = [
    "LayoutSettings",
    "CourseShape",
    "StartLinePlacement",
    "FinishLinePlacement",
    "WindMarkOption",
    "LeewardMarkOption",
    "all_settings",
    "revalidate",
    "valid_starts",
    "valid_finishes",
    "valid_wind_options",
    "valid_lee_options",
]
