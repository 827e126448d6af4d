"""Analytics schemas package."""
from .analytics import (
    DailyTicketTrend,
    DashboardAlerts,
    DashboardCustomers,
    DashboardData,
    DashboardDevices,
    DashboardOverview,
    DashboardResponse,
    DashboardTickets,
    PredictionsResponse,
    TicketActivity,
    TrendsResponse,
)

__all__ = [
    "DailyTicketTrend",
    "DashboardAlerts",
    "DashboardCustomers",
    "DashboardData",
    "DashboardDevices",
    "DashboardOverview",
    "DashboardResponse",
    "DashboardTickets",
    "PredictionsResponse",
    "TicketActivity",
    "TrendsResponse",
]
