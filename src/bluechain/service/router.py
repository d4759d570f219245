"""FastAPI router for the registry service.

Exposes the registry's three invocation channels:
- Deployment (/init)
- Mutations (/invoke)
- Read-only queries (/query)
"""

from typing import TYPE_CHECKING, Any

from fastapi import APIRouter

from .logging import bind_context
from .models import ErrorResponse, InvocationRequest, InvocationResponse

if TYPE_CHECKING:
    from ..registry.router import SupplyRegistry

_ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse},
    403: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
    503: {"model": ErrorResponse},
}


def _to_response(function: str, result: bytes | None) -> InvocationResponse:
    return InvocationResponse(
        function=function,
        result=result.decode("utf-8") if result is not None else None,
    )


def build_router(registry: "SupplyRegistry") -> APIRouter:
    """Build the registry API router.

    Handlers are plain ``def`` so FastAPI runs them in its threadpool; the
    registry's write lock serializes the mutations.
    """
    router = APIRouter(responses=_ERROR_RESPONSES)

    @router.post("/init", response_model=InvocationResponse)
    def init() -> InvocationResponse:
        """Create the empty SupplyItem index."""
        bind_context(function="initialize")
        registry.initialize()
        return _to_response("initialize", None)

    @router.post("/invoke", response_model=InvocationResponse)
    def invoke(request: InvocationRequest) -> InvocationResponse:
        """Run a mutating operation (create, update, transfer)."""
        bind_context(function=request.function)
        result = registry.invoke(request.function, request.args)
        return _to_response(request.function, result)

    @router.post("/query", response_model=InvocationResponse)
    def query(request: InvocationRequest) -> InvocationResponse:
        """Run a read-only operation (read, get_supplyItems)."""
        bind_context(function=request.function)
        result = registry.query(request.function, request.args)
        return _to_response(request.function, result)

    @router.get("/operations")
    def operations() -> dict[str, Any]:
        """List the operations this deployment accepts."""
        return {
            "operations": registry.operations,
            "track_ownership": registry.schema.track_ownership,
            "create_fields": list(registry.schema.create_fields),
        }

    return router


__all__ = ["build_router"]
