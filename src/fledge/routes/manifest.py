"""Pure derivations over a route manifest.

- :func:`leaf_routes` — routes with no children, in manifest order
- :func:`match_chain` — root-first ancestor chain for one route

Plus dict conversion used when a manifest crosses a process boundary
(see :mod:`fledge.runner`).
"""

from collections.abc import Mapping
from typing import Any

from fledge.errors import CorruptManifest, MissingRoute, RouteCycle
from fledge.routes.types import Route, RouteManifest


def leaf_routes(routes: RouteManifest) -> list[Route]:
    """Return every route that is not another route's parent.

    Order follows the manifest's insertion order, which later fixes
    the order of server bundles.
    """
    parent_ids = {route.parent_id for route in routes.values() if route.parent_id is not None}
    return [route for route_id, route in routes.items() if route_id not in parent_ids]


def match_chain(routes: RouteManifest, route_id: str) -> tuple[Route, ...]:
    """Return the chain of routes from the outermost ancestor to *route_id*.

    Raises:
        MissingRoute: An id on the walk is not in the manifest.
        RouteCycle: The parent links loop back on themselves.
    """
    chain: list[Route] = []
    seen: set[str] = set()
    current: str | None = route_id

    while current is not None:
        if current in seen:
            raise RouteCycle(route_id, tuple(r.id for r in chain) + (current,))
        route = routes.get(current)
        if route is None:
            raise MissingRoute(current)
        seen.add(current)
        chain.append(route)
        current = route.parent_id

    chain.reverse()
    return tuple(chain)


# ---------------------------------------------------------------------------
# Dict conversion
# ---------------------------------------------------------------------------


def route_to_dict(route: Route) -> dict[str, Any]:
    """Serialize a route using the camelCase keys bundlers expect."""
    data: dict[str, Any] = {"id": route.id, "file": route.file}
    if route.parent_id is not None:
        data["parentId"] = route.parent_id
    if route.path is not None:
        data["path"] = route.path
    if route.index:
        data["index"] = True
    if route.case_sensitive:
        data["caseSensitive"] = True
    return data


def route_from_dict(data: Mapping[str, Any]) -> Route:
    """Build a :class:`Route` from a dict produced by :func:`route_to_dict`.

    Accepts both ``parentId`` and ``parent_id`` spellings.
    """
    try:
        route_id = data["id"]
    except KeyError:
        msg = f"Route entry has no 'id': {dict(data)!r}"
        raise CorruptManifest(msg) from None

    return Route(
        id=str(route_id),
        parent_id=data.get("parentId", data.get("parent_id")),
        file=data.get("file", ""),
        path=data.get("path"),
        index=bool(data.get("index", False)),
        case_sensitive=bool(data.get("caseSensitive", data.get("case_sensitive", False))),
    )


def manifest_from_dict(data: Mapping[str, Mapping[str, Any]]) -> dict[str, Route]:
    """Build a manifest from ``{id: route_dict}``, preserving key order.

    Raises:
        CorruptManifest: A key does not match its entry's ``id``.
    """
    manifest: dict[str, Route] = {}
    for key, entry in data.items():
        route = route_from_dict(entry)
        if route.id != key:
            msg = f"Manifest key {key!r} does not match route id {route.id!r}"
            raise CorruptManifest(msg)
        manifest[key] = route
    return manifest


def manifest_to_dict(routes: RouteManifest) -> dict[str, dict[str, Any]]:
    return {route_id: route_to_dict(route) for route_id, route in routes.items()}
