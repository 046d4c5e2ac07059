from pydantic import BaseModel, ConfigDict

from medicare.domain.models import Role, Session
from medicare.routing.guard import RouteGuard
from medicare.session.store import SessionStore
from medicare.ui.ports import Navigator


class ProtectedRoute(BaseModel):
    model_config = ConfigDict(frozen=True)

    path: str
    require_role: Role | None = None


class NavLink(BaseModel):
    model_config = ConfigDict(frozen=True)

    label: str
    path: str


PROTECTED_ROUTES: dict[str, ProtectedRoute] = {
    route.path: route
    for route in (
        ProtectedRoute(path="/appointments"),
        ProtectedRoute(path="/book-appointment"),
        ProtectedRoute(path="/payments"),
        ProtectedRoute(path="/dashboard", require_role=Role.ADMIN),
        ProtectedRoute(path="/admin", require_role=Role.ADMIN),
    )
}

_PUBLIC_LINKS = (
    NavLink(label="Home", path="/"),
    NavLink(label="Doctors", path="/doctors"),
    NavLink(label="Tests", path="/tests"),
    NavLink(label="Contact", path="/contact"),
)

_SIGNED_OUT_LINKS = (
    NavLink(label="Login", path="/login"),
    NavLink(label="Register", path="/register"),
)

_SIGNED_IN_LINKS = (
    NavLink(label="Book Appointment", path="/book-appointment"),
    NavLink(label="Appointments", path="/appointments"),
    NavLink(label="Payments", path="/payments"),
)

_ADMIN_LINKS = (
    NavLink(label="Dashboard", path="/dashboard"),
    NavLink(label="Admin", path="/admin"),
)


def guard_for(
    path: str,
    store: SessionStore,
    navigator: Navigator,
    *,
    login_path: str = "/login",
    home_path: str = "/",
    readiness_timeout: float = 0.1,
) -> RouteGuard | None:
    """Build the guard for ``path``, or None when the path is public."""
    route = PROTECTED_ROUTES.get(path)
    if route is None:
        return None
    return RouteGuard(
        store,
        navigator,
        require_role=route.require_role,
        login_path=login_path,
        home_path=home_path,
        readiness_timeout=readiness_timeout,
    )


def navigation_links(session: Session) -> list[NavLink]:
    """Links shown in the main navigation for the given session."""
    links = list(_PUBLIC_LINKS)
    if not (session.is_authenticated and session.user):
        return links + list(_SIGNED_OUT_LINKS)

    links.extend(_SIGNED_IN_LINKS)
    if session.user.role is Role.ADMIN:
        links.extend(_ADMIN_LINKS)
    return links
