from typing import Any


def success_response(data: Any = None, message: str | None = None) -> dict:
    return {"status": "success", "data": data, "message": message, "errors": []}


def error_response(message: str, data: Any = None, errors: list[str] | None = None) -> dict:
    return {"status": "error", "data": data, "message": message, "errors": errors or []}
