"""
Use case base class.

A use case is one operation with a request type in and a response type
out. It raises domain exceptions (EmptyScriptError, NotFoundError, ...)
and never transport errors; mapping those is the caller's job.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

Req = TypeVar("Req")
Resp = TypeVar("Resp")


class UseCase(ABC, Generic[Req, Resp]):
    """Single operation driven from a route, a CLI or a test alike."""

    @abstractmethod
    async def execute(self, request: Req) -> Resp:
        pass
