"""Route manifest — the route tree and its derivations.

The manifest maps route id to :class:`Route`.  Leaf routes and their
match chains drive how routes are split into server bundles.

Usage::

    from fledge.routes import discover_routes, leaf_routes, match_chain

    routes = discover_routes("app")
    for leaf in leaf_routes(routes):
        chain = match_chain(routes, leaf.id)
"""

from fledge.routes.discovery import discover_routes
from fledge.routes.manifest import (
    leaf_routes,
    manifest_from_dict,
    manifest_to_dict,
    match_chain,
)
from fledge.routes.types import (
    Route,
    RouteManifest,
    ServerBuildConfig,
    ServerBundleArgs,
    ServerBundleFunction,
)

__all__ = [
    "Route",
    "RouteManifest",
    "ServerBuildConfig",
    "ServerBundleArgs",
    "ServerBundleFunction",
    "discover_routes",
    "leaf_routes",
    "manifest_from_dict",
    "manifest_to_dict",
    "match_chain",
]
