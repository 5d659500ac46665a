"""
Presentation Layer

ViewModels for banners, legends, placeholders, summary cards and tables.
"""

from .viewmodels import (
    BannerViewModel, PlaceholderViewModel, LegendEntry, GraphCardViewModel,
    AllocationRowViewModel, AllocationCardViewModel, DeadlockPageViewModel,
    StatCardViewModel, DeadlockStatusViewModel,
    ScheduleSummaryViewModel, ProcessRowViewModel, SchedulePageViewModel,
    DashboardPresenter,
)

__all__ = [
    'BannerViewModel', 'PlaceholderViewModel', 'LegendEntry', 'GraphCardViewModel',
    'AllocationRowViewModel', 'AllocationCardViewModel', 'DeadlockPageViewModel',
    'StatCardViewModel', 'DeadlockStatusViewModel',
    'ScheduleSummaryViewModel', 'ProcessRowViewModel', 'SchedulePageViewModel',
    'DashboardPresenter',
]
