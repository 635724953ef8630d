"""Tests for path classification and the route allow-list."""

import pytest

from propdesk.core.config import DEFAULT_ROUTE_ALLOW_LIST, GatewayConfig
from propdesk.gateway.paths import PathClass, RouteAllowList, classify


class TestClassify:
    """Test classify() maps each path to exactly one class."""

    @pytest.mark.parametrize(
        "path,expected",
        [
            ("/", PathClass.ROOT),
            ("/welcome", PathClass.PROFILE_COMPLETION),
            ("/sign-in", PathClass.AUTH_ONLY),
            ("/register", PathClass.AUTH_ONLY),
            ("/reset-password", PathClass.AUTH_ONLY),
            ("/reset-password/abc123", PathClass.AUTH_ONLY),
            ("/welcome/step-2", PathClass.AUTH_ONLY),
            ("/dashboard", PathClass.PROTECTED),
            ("/clients/42", PathClass.PROTECTED),
            ("/my-account", PathClass.PROTECTED),
        ],
    )
    def test_classification(self, gateway_config: GatewayConfig, path: str, expected: PathClass):
        assert classify(path, gateway_config) is expected

    def test_auth_prefix_is_plain_prefix_match(self, gateway_config: GatewayConfig):
        """Prefixes match without a path-segment boundary, e.g. /sign-inx."""
        assert classify("/sign-inx", gateway_config) is PathClass.AUTH_ONLY
        assert classify("/registered-users", gateway_config) is PathClass.AUTH_ONLY

    def test_classify_is_idempotent(self, gateway_config: GatewayConfig):
        for path in ["/", "/welcome", "/sign-in", "/dashboard", "/reset-password/x"]:
            assert classify(path, gateway_config) == classify(path, gateway_config)

    def test_custom_profile_completion_path(self):
        config = GatewayConfig(profile_completion_path="/onboarding")
        assert classify("/onboarding", config) is PathClass.PROFILE_COMPLETION
        assert classify("/welcome", config) is PathClass.AUTH_ONLY


class TestRouteAllowList:
    """Test the pre-filter pattern matching."""

    @pytest.fixture
    def allow_list(self) -> RouteAllowList:
        return RouteAllowList.from_patterns(DEFAULT_ROUTE_ALLOW_LIST)

    @pytest.mark.parametrize(
        "path",
        [
            "/",
            "/sign-in",
            "/register",
            "/dashboard",
            "/welcome",
            "/reset-password",
            "/reset-password/token-abc",
            "/reset-password/a/b",
        ],
    )
    def test_allow_listed_paths_match(self, allow_list: RouteAllowList, path: str):
        assert allow_list.matches(path)

    @pytest.mark.parametrize(
        "path",
        [
            "/clients",
            "/my-properties/7",
            "/dashboard/stats",
            "/sign-in/extra",
            "/welcome/step-2",
            "/reset-passwordx",
            "/health",
            "/static/app.css",
            "",
        ],
    )
    def test_other_paths_do_not_match(self, allow_list: RouteAllowList, path: str):
        assert not allow_list.matches(path)

    def test_from_patterns_splits_exact_and_subtrees(self):
        allow_list = RouteAllowList.from_patterns(["/a", "/b/*"])

        assert allow_list.exact == frozenset({"/a"})
        assert allow_list.subtrees == ("/b",)

    def test_root_subtree_matches_everything(self):
        allow_list = RouteAllowList.from_patterns(["/*"])

        assert allow_list.matches("/")
        assert allow_list.matches("/anything/below")
