"""Tests for fledge.routes.manifest — leaf routes and match chains."""

import pytest

from fledge.errors import CorruptManifest, MissingRoute, RouteCycle
from fledge.routes.manifest import (
    leaf_routes,
    manifest_from_dict,
    manifest_to_dict,
    match_chain,
    route_from_dict,
)
from fledge.routes.types import Route


def _manifest(*routes: Route) -> dict[str, Route]:
    return {route.id: route for route in routes}


ROOT = Route(id="root", file="root.py", path="")
BLOG = Route(id="routes/blog", parent_id="root", path="blog")
BLOG_INDEX = Route(id="routes/blog/page", parent_id="routes/blog", index=True)
BLOG_POST = Route(id="routes/blog/:slug", parent_id="routes/blog", path=":slug")
ABOUT = Route(id="routes/about", parent_id="root", path="about")


class TestLeafRoutes:
    def test_single_root_is_a_leaf(self) -> None:
        assert leaf_routes(_manifest(ROOT)) == [ROOT]

    def test_empty_manifest(self) -> None:
        assert leaf_routes({}) == []

    def test_excludes_parents(self) -> None:
        routes = _manifest(ROOT, BLOG, BLOG_INDEX, BLOG_POST, ABOUT)
        assert leaf_routes(routes) == [BLOG_INDEX, BLOG_POST, ABOUT]

    def test_follows_insertion_order(self) -> None:
        routes = _manifest(ABOUT, BLOG_POST, ROOT, BLOG_INDEX, BLOG)
        assert [r.id for r in leaf_routes(routes)] == [
            "routes/about",
            "routes/blog/:slug",
            "routes/blog/page",
        ]

    def test_leaf_chains_cover_every_reachable_route(self) -> None:
        routes = _manifest(ROOT, BLOG, BLOG_INDEX, BLOG_POST, ABOUT)
        covered = {
            route.id for leaf in leaf_routes(routes) for route in match_chain(routes, leaf.id)
        }
        assert covered == set(routes)


class TestMatchChain:
    def test_root_only(self) -> None:
        assert match_chain(_manifest(ROOT), "root") == (ROOT,)

    def test_root_first_target_last(self) -> None:
        routes = _manifest(ROOT, BLOG, BLOG_POST)
        assert match_chain(routes, "routes/blog/:slug") == (ROOT, BLOG, BLOG_POST)

    def test_length_is_depth_plus_one(self) -> None:
        routes = _manifest(ROOT, BLOG, BLOG_INDEX, ABOUT)
        assert len(match_chain(routes, "routes/about")) == 2
        assert len(match_chain(routes, "routes/blog/page")) == 3

    def test_missing_parent_raises(self) -> None:
        routes = _manifest(BLOG, BLOG_POST)
        with pytest.raises(MissingRoute) as exc_info:
            match_chain(routes, "routes/blog/:slug")
        assert exc_info.value.route_id == "root"
        assert str(exc_info.value) == "Missing route for root"

    def test_missing_start_route_raises(self) -> None:
        with pytest.raises(MissingRoute):
            match_chain(_manifest(ROOT), "nope")

    def test_missing_route_is_corrupt_manifest(self) -> None:
        with pytest.raises(CorruptManifest):
            match_chain({}, "root")

    def test_cycle_raises_instead_of_hanging(self) -> None:
        routes = _manifest(
            Route(id="a", parent_id="b"),
            Route(id="b", parent_id="a"),
        )
        with pytest.raises(RouteCycle) as exc_info:
            match_chain(routes, "a")
        assert exc_info.value.chain == ("a", "b", "a")

    def test_self_parent_is_a_cycle(self) -> None:
        with pytest.raises(RouteCycle):
            match_chain(_manifest(Route(id="a", parent_id="a")), "a")


class TestDictConversion:
    def test_route_to_dict_uses_camel_case(self) -> None:
        data = manifest_to_dict(_manifest(BLOG))
        assert data == {"routes/blog": {"id": "routes/blog", "file": "", "parentId": "root", "path": "blog"}}

    def test_accepts_snake_case_parent(self) -> None:
        route = route_from_dict({"id": "a", "parent_id": "root"})
        assert route.parent_id == "root"

    def test_entry_without_id(self) -> None:
        with pytest.raises(CorruptManifest, match="no 'id'"):
            route_from_dict({"path": "x"})

    def test_key_mismatch(self) -> None:
        with pytest.raises(CorruptManifest, match="does not match"):
            manifest_from_dict({"a": {"id": "b"}})

    def test_preserves_order_and_payload(self) -> None:
        routes = _manifest(ROOT, BLOG, BLOG_INDEX, BLOG_POST)
        restored = manifest_from_dict(manifest_to_dict(routes))
        assert list(restored) == list(routes)
        assert restored["routes/blog/page"].index is True
