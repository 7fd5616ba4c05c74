"""Dashboard error taxonomy.

Each error knows the HTTP status and the ``error`` label it is reported with,
so the API boundary can translate any of them into ``{error, details, message}``.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence


class DashboardError(Exception):
    status_code = 500
    error = "Internal Error"
    default_message = "Internal server error occurred"

    def __init__(self, details: str, message: Optional[str] = None) -> None:
        super().__init__(details)
        self.details = details
        self.message = message or self.default_message

    def to_payload(self) -> Dict[str, Any]:
        return {"error": self.error, "details": self.details, "message": self.message}


class ConfigurationError(DashboardError):
    error = "Configuration Error"
    default_message = "Please configure the database environment variables"

    def __init__(self, missing: Sequence[str], message: Optional[str] = None) -> None:
        self.missing: List[str] = list(missing)
        super().__init__(f"Missing environment variables: {', '.join(self.missing)}", message)


class InvalidRequestError(DashboardError):
    status_code = 400
    error = "Invalid Database"
    default_message = "Select one of the supported databases"

    def __init__(self, value: str, allowed: Sequence[str], message: Optional[str] = None) -> None:
        self.value = value
        self.allowed: List[str] = list(allowed)
        super().__init__(
            f"Invalid database '{value}'. Must be one of: {', '.join(self.allowed)}",
            message,
        )


class DatabaseConnectionError(DashboardError):
    error = "Database Connection Failed"
    default_message = "Check database credentials and network access"


class QueryError(DashboardError):
    error = "Query Failed"

    def __init__(self, database: str, details: str) -> None:
        self.database = database
        super().__init__(f"Query error on {database}: {details}")


class AggregationError(DashboardError):
    error = "Failed to fetch dashboard statistics"


__all__ = [
    "DashboardError",
    "ConfigurationError",
    "InvalidRequestError",
    "DatabaseConnectionError",
    "QueryError",
    "AggregationError",
]
