from typing import Any, Awaitable, Callable

from fastapi import FastAPI, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from keystone_di.domain import IContainer, IdentifierLike


def create_fastapi_dependency(container: IContainer, identifier: IdentifierLike) -> Callable[[], Any]:
    """Create a FastAPI Depends() callable that resolves from the container.

    The resolved object follows the binding's lifetime: singleton bindings
    yield the same object on every request.

    Args:
        container: The container to resolve from.
        identifier: The identifier, or class, to resolve.

    Returns:
        A callable that FastAPI can use with Depends().

    Example:
        >>> container = Container()
        >>> container.single(UserRepository, lambda c: UserRepository(c.get("db")))
        >>>
        >>> get_user_repo = create_fastapi_dependency(container, UserRepository)
        >>>
        >>> @app.get("/users")
        >>> async def list_users(repo: UserRepository = Depends(get_user_repo)):
        ...     return await repo.get_all()
    """

    def dependency() -> Any:
        """Resolve the identifier from the container."""
        return container.get(identifier)

    return dependency


def create_request_dependency(identifier: IdentifierLike) -> Callable[[Request], Any]:
    """Create a FastAPI dependency resolving from the request's container.

    Requires the ContainerMiddleware to be installed.

    Args:
        identifier: The identifier, or class, to resolve.

    Returns:
        A callable that resolves from ``request.state.container``.

    Example:
        >>> app.add_middleware(ContainerMiddleware, container=container)
        >>>
        >>> get_mailer = create_request_dependency("mailer")
        >>>
        >>> @app.post("/invite")
        >>> async def invite(mailer: Mailer = Depends(get_mailer)):
        ...     mailer.send(...)
    """

    def request_dependency(request: Request) -> Any:
        """Resolve from the container attached to the request."""
        if not hasattr(request.state, "container"):
            raise RuntimeError(
                "Request does not have a container attached. Did you forget to add ContainerMiddleware?"
            )
        container: IContainer = request.state.container
        return container.get(identifier)

    return request_dependency


class ContainerMiddleware(BaseHTTPMiddleware):
    """Middleware that attaches a container to every request.

    The container is accessible via `request.state.container`.

    Attributes:
        container: The container to attach.
    """

    def __init__(self, app: FastAPI, container: IContainer):
        """Initialize the middleware with a container.

        Args:
            app: The FastAPI/Starlette application.
            container: The container to attach to requests.
        """
        super().__init__(app)
        self.container = container

    async def dispatch(self, request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
        """Attach the container to the request and execute the endpoint.

        Args:
            request: The incoming HTTP request.
            call_next: The next middleware or endpoint handler.

        Returns:
            The response from the endpoint.
        """
        request.state.container = self.container
        return await call_next(request)
