"""Render module for contract calculation output display."""

from render.renderers import (
    BaseRenderer,
    SummaryRenderer,
    ScheduleRenderer,
    InstallmentsRenderer,
    TimelineRenderer,
    format_money,
    format_millions,
    parse_year_range,
    RENDERER_REGISTRY,
    RANGED_MODES,
)

__all__ = [
    'BaseRenderer',
    'SummaryRenderer',
    'ScheduleRenderer',
    'InstallmentsRenderer',
    'TimelineRenderer',
    'format_money',
    'format_millions',
    'parse_year_range',
    'RENDERER_REGISTRY',
    'RANGED_MODES',
]
