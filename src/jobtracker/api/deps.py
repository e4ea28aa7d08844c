from __future__ import annotations

from typing import TypeVar

from fastapi import HTTPException, Request

from jobtracker.container import Container
from jobtracker.core.result import Result

T = TypeVar("T")

SERVER_FAILURES = (
    "Failed to read",
    "Failed to decode",
    "Failed to save",
    "Failed to delete",
    "Failed to clear",
    "Failed to load",
)


def get_container(request: Request) -> Container:
    return request.app.state.container


def status_code_for(message: str) -> int:
    if " not found: " in message:
        return 404
    if message.startswith(SERVER_FAILURES):
        return 500
    return 400


def unwrap_or_raise(result: Result[T, str]) -> T:
    if result.is_err():
        message = str(result.unwrap_err())
        raise HTTPException(status_code=status_code_for(message), detail=message)
    return result.unwrap()
