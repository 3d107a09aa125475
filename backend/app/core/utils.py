"""
Utility functions for the application.
"""
from typing import Any, Dict, Optional
from datetime import date, datetime, time


def day_bounds(day: date) -> tuple:
    """Return (start, end) datetimes covering a calendar day, local midnight to 23:59:59.999999."""
    return datetime.combine(day, time.min), datetime.combine(day, time.max)


def format_response(data: Any = None, message: Optional[str] = None) -> Dict[str, Any]:
    """Format a successful API response."""
    response = {"success": True}
    if message:
        response["message"] = message
    if data is not None:
        response["data"] = data
    return response


def format_error(message: str) -> Dict[str, Any]:
    """Format error response."""
    return {"success": False, "message": message}
