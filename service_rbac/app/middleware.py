"""
FastAPI integration for the permission matcher.
"""

from pathlib import PurePosixPath
from typing import Any, Callable, Dict, Mapping, Optional, Sequence

from fastapi import HTTPException, Request

from shared.errors import AccessLayerException, AuthenticationError, AuthorizationError
from shared.logging import get_logger, set_user_context

from .rbac import Rbac
from .rules.context import RequestContext


def build_request_context(
    request: Request,
    controller_key: str = "controller",
    action_key: str = "action",
    params: Optional[Mapping[str, Any]] = None,
    extensions: Sequence[str] = ()
) -> RequestContext:
    """Snapshot a request into the parameters the matcher reads.

    Static ``params`` come first, then path parameters, then any
    ``request.state.rbac_params`` set by earlier middleware.

    ``_ext`` is only taken from the path suffix when the suffix is one of
    ``extensions``; it is then stripped from the path parameter carrying it.
    """
    route_params: Dict[str, Any] = dict(params or {})
    route_params.update(request.path_params)

    if route_params.get("_ext") is None:
        route_params["_ext"] = _strip_extension(request, route_params, extensions)

    overrides = getattr(request.state, "rbac_params", None)
    if overrides:
        route_params.update(overrides)

    route_params["controller"] = route_params.get(controller_key)
    route_params["action"] = route_params.get(action_key)

    return RequestContext(
        params=route_params,
        attributes={
            "method": request.method,
            "path": request.url.path,
            "query": dict(request.query_params),
        }
    )


def _strip_extension(request: Request, route_params: Dict[str, Any], extensions: Sequence[str]) -> Optional[str]:
    """Return the registered extension of the path, removing it from its parameter."""
    last_segment = PurePosixPath(request.url.path).name
    suffix = PurePosixPath(last_segment).suffix[1:]
    if not suffix or suffix not in extensions:
        return None

    for key, value in route_params.items():
        if value == last_segment:
            route_params[key] = last_segment[:-len(suffix) - 1]
    return suffix


def user_from_state(request: Request) -> Optional[Mapping[str, Any]]:
    """Read the user stored on the request by the authentication layer."""
    return getattr(request.state, "user_info", None)


class RbacGate:
    """FastAPI dependency denying requests the permission matcher rejects.

    Anonymous requests are answered with 401, authenticated ones with 403.
    On success the dependency returns the current user.
    """

    def __init__(
        self,
        rbac: Rbac,
        user_getter: Optional[Callable[[Request], Optional[Mapping[str, Any]]]] = None,
        params: Optional[Mapping[str, Any]] = None
    ):
        self.rbac = rbac
        self.user_getter = user_getter or user_from_state
        self.params = dict(params or {})
        self.logger = get_logger("rbac.gate")

    async def __call__(self, request: Request) -> Mapping[str, Any]:
        user = self.user_getter(request) or {}
        if user:
            set_user_context(user.get("id"))

        context = build_request_context(
            request,
            controller_key=self.rbac.get_config("controller_key"),
            action_key=self.rbac.get_config("action_key"),
            params=self.params,
            extensions=self.rbac.get_config("extensions")
        )

        if self.rbac.check_permissions(user, context):
            return user

        details = {
            "controller": context.get_param("controller"),
            "action": context.get_param("action"),
        }
        if not user:
            error: AccessLayerException = AuthenticationError(details=details)
            status_code = 401
        else:
            error = AuthorizationError("Permission denied", details=details)
            status_code = 403

        self.logger.warning(
            "Request denied",
            status_code=status_code,
            path=request.url.path,
            **details
        )
        raise HTTPException(status_code=status_code, detail=error.to_response().model_dump())
