"""Tests for the gateway decision engine."""

import pytest

from propdesk.core.config import GatewayConfig
from propdesk.gateway.decision import (
    ALLOW,
    Allow,
    Redirect,
    decide,
    encode_callback,
    original_destination,
)
from propdesk.gateway.paths import PathClass, classify
from propdesk.gateway.session import SessionState

NONE = SessionState.UNAUTHENTICATED
INCOMPLETE = SessionState.AUTHENTICATED_INCOMPLETE
COMPLETE = SessionState.AUTHENTICATED_COMPLETE


def _decide(config: GatewayConfig, state: SessionState, path: str, query: str = ""):
    return decide(state, classify(path, config), path, config, query=query)


class TestScenarios:
    """End-to-end decision scenarios for the default configuration."""

    def test_no_session_on_dashboard_redirects_to_sign_in_with_callback(self, gateway_config):
        decision = _decide(gateway_config, NONE, "/dashboard")

        assert decision == Redirect("/sign-in", callback_url="/dashboard")
        assert decision.location == "/sign-in?callbackUrl=%2Fdashboard"

    def test_complete_session_on_root_goes_to_dashboard(self, gateway_config):
        assert _decide(gateway_config, COMPLETE, "/") == Redirect("/dashboard")

    def test_no_session_on_root_goes_to_sign_in(self, gateway_config):
        decision = _decide(gateway_config, NONE, "/")

        assert decision == Redirect("/sign-in")
        assert decision.location == "/sign-in"

    def test_incomplete_session_on_sign_in_goes_to_welcome(self, gateway_config):
        assert _decide(gateway_config, INCOMPLETE, "/sign-in") == Redirect("/welcome")

    def test_complete_session_on_sign_in_goes_to_root(self, gateway_config):
        assert _decide(gateway_config, COMPLETE, "/sign-in") == Redirect("/")

    def test_no_session_on_register_is_allowed(self, gateway_config):
        assert _decide(gateway_config, NONE, "/register") == ALLOW


class TestProfileCompletionPrecedence:
    """Incomplete profiles are sent to /welcome before any other rule applies."""

    @pytest.mark.parametrize(
        "path",
        ["/", "/sign-in", "/register", "/dashboard", "/reset-password", "/reset-password/tok"],
    )
    def test_incomplete_always_redirects_to_welcome(self, gateway_config, path: str):
        assert _decide(gateway_config, INCOMPLETE, path) == Redirect("/welcome")

    def test_incomplete_on_welcome_is_allowed(self, gateway_config):
        assert _decide(gateway_config, INCOMPLETE, "/welcome") == ALLOW

    def test_complete_on_welcome_is_bounced_to_root(self, gateway_config):
        assert _decide(gateway_config, COMPLETE, "/welcome") == Redirect("/")

    def test_no_session_on_welcome_is_allowed(self, gateway_config):
        assert _decide(gateway_config, NONE, "/welcome") == ALLOW


class TestRemainingRules:
    """Auth-only and protected pages."""

    @pytest.mark.parametrize("path", ["/register", "/reset-password", "/reset-password/tok"])
    def test_complete_on_auth_page_goes_to_root(self, gateway_config, path: str):
        assert _decide(gateway_config, COMPLETE, path) == Redirect("/")

    @pytest.mark.parametrize("path", ["/sign-in", "/reset-password/tok"])
    def test_no_session_on_auth_page_is_allowed(self, gateway_config, path: str):
        assert _decide(gateway_config, NONE, path) == ALLOW

    def test_complete_on_protected_page_is_allowed(self, gateway_config):
        assert isinstance(_decide(gateway_config, COMPLETE, "/dashboard"), Allow)

    def test_callback_includes_query_string(self, gateway_config):
        decision = _decide(gateway_config, NONE, "/dashboard", query="tab=stats&page=2")

        assert decision.callback_url == "/dashboard?tab=stats&page=2"
        assert decision.location == "/sign-in?callbackUrl=%2Fdashboard%3Ftab%3Dstats%26page%3D2"

    def test_decision_covers_every_combination(self, gateway_config):
        """decide() is total: every state/class pair yields Allow or Redirect."""
        paths = {
            PathClass.ROOT: "/",
            PathClass.AUTH_ONLY: "/sign-in",
            PathClass.PROFILE_COMPLETION: "/welcome",
            PathClass.PROTECTED: "/dashboard",
        }
        for state in SessionState:
            for path_class, path in paths.items():
                decision = decide(state, path_class, path, gateway_config)
                assert isinstance(decision, (Allow, Redirect))

    def test_decide_is_deterministic(self, gateway_config):
        for state in SessionState:
            first = _decide(gateway_config, state, "/dashboard", query="a=1")
            second = _decide(gateway_config, state, "/dashboard", query="a=1")
            assert first == second

    def test_configured_paths_are_used(self):
        config = GatewayConfig(home_path="/inicio", sign_in_path="/login", callback_param="next")

        assert _decide(config, COMPLETE, "/") == Redirect("/inicio")
        assert _decide(config, NONE, "/clients").location == "/login?next=%2Fclients"


class TestCallbackEncoding:
    """Callback values are encoded like encodeURIComponent."""

    def test_reserved_characters_are_encoded(self):
        assert encode_callback("/a b?c=d&e=/f#g") == "%2Fa%20b%3Fc%3Dd%26e%3D%2Ff%23g"

    def test_unreserved_marks_are_kept(self):
        assert encode_callback("-_.!~*'()") == "-_.!~*'()"

    def test_non_ascii_is_utf8_encoded(self):
        assert encode_callback("/propiedad/ñ") == "%2Fpropiedad%2F%C3%B1"

    def test_original_destination(self):
        assert original_destination("/clients") == "/clients"
        assert original_destination("/clients", "q=casa") == "/clients?q=casa"
