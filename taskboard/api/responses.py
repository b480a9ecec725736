# taskboard/api/responses.py
"""
Response envelope shared by every endpoint.

    success: {"success": true, "data": ..., "count"?: int, "message"?: str}
    failure: {"success": false, "error": str}
"""
from typing import Any, Dict, Optional


def success(data: Any, count: Optional[int] = None, message: Optional[str] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True, "data": data}
    if count is not None:
        body["count"] = count
    if message is not None:
        body["message"] = message
    return body


def failure(error: str) -> Dict[str, Any]:
    return {"success": False, "error": error}
