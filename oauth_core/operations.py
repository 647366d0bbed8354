"""
Operation Registry
==================
Metadata of the API operations protected by OAuth.
"""

from dataclasses import dataclass
from typing import Callable, Dict, Optional, Tuple

from .errors import UnknownOperationError


@dataclass(frozen=True)
class Operation:
    """An invocable API operation."""
    operation_id: str
    method: str
    title: str
    needs_auth: bool = True
    path: Optional[str] = None


class OperationRegistry:
    """
    Looks up operations by id, and by (method, path) for middleware routing.
    """

    def __init__(self):
        self._operations: Dict[str, Operation] = {}
        self._routes: Dict[Tuple[str, str], str] = {}

    def register(
        self,
        operation_id: str,
        method: str,
        title: str,
        needs_auth: bool = True,
        path: Optional[str] = None,
    ) -> Operation:
        operation = Operation(
            operation_id=operation_id,
            method=method.upper(),
            title=title,
            needs_auth=needs_auth,
            path=path,
        )
        self._operations[operation_id] = operation
        if path is not None:
            self._routes[(operation.method, path.rstrip("/") or "/")] = operation_id
        return operation

    def operation(
        self,
        operation_id: str,
        method: str,
        title: str,
        needs_auth: bool = True,
        path: Optional[str] = None,
    ) -> Callable:
        """
        Decorator form of ``register``.

        Usage:
            @registry.operation("items.list", "GET", "List items", path="/items")
            async def list_items(request): ...
        """
        def decorator(fn: Callable) -> Callable:
            self.register(operation_id, method, title, needs_auth, path)
            return fn
        return decorator

    def get(self, operation_id: str) -> Operation:
        try:
            return self._operations[operation_id]
        except KeyError:
            raise UnknownOperationError(operation_id)

    def operation_requires_auth(self, operation_id: str) -> bool:
        return self.get(operation_id).needs_auth

    def operation_metadata(self, operation_id: str) -> Dict[str, str]:
        operation = self.get(operation_id)
        return {"method": operation.method, "title": operation.title}

    def resolve(self, method: str, path: str) -> Optional[str]:
        """Operation id routed at (method, path), if any."""
        return self._routes.get((method.upper(), path.rstrip("/") or "/"))

    def __contains__(self, operation_id: str) -> bool:
        return operation_id in self._operations
