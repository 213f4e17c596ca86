"""
Unit tests for JWT token validation (dokploy_mcp/auth.py).

Each test targets one step of validate_token(): header presence, Bearer
scheme, signature, expiry, and the sub/scope claims. TestGenerateToken covers
the token minting script.
"""

import pytest

from dokploy_mcp.auth import AuthError, validate_token
from scripts.generate_token import generate_token, resolve_scopes

SECRET = "test-secret"


class TestValidateToken:
    # ----- Happy path -----

    def test_valid_token_decodes_correctly(self, make_auth_header):
        header = make_auth_header(sub="alice", scopes=["application:manage", "project:manage"])

        result = validate_token(header, SECRET)

        assert result.subject == "alice"
        assert result.scopes == ["application:manage", "project:manage"]

    def test_bearer_scheme_case_insensitive(self, make_token):
        token = make_token(sub="alice", scopes=["project:manage"])

        result = validate_token(f"bearer {token}", SECRET)

        assert result.scopes == ["project:manage"]

    # ----- Missing / malformed Authorization header -----

    @pytest.mark.parametrize("header", [None, ""])
    def test_missing_header_raises_auth_error(self, header):
        with pytest.raises(AuthError, match="Missing Authorization header"):
            validate_token(header, SECRET)

    def test_non_bearer_scheme_raises_auth_error(self, make_token):
        token = make_token(sub="alice", scopes=["project:manage"])

        with pytest.raises(AuthError, match="Invalid Authorization header format"):
            validate_token(f"Basic {token}", SECRET)

    def test_missing_token_after_bearer_raises_auth_error(self):
        with pytest.raises(AuthError, match="Invalid Authorization header format"):
            validate_token("Bearer", SECRET)

    # ----- Signature, expiry, required claims -----

    def test_malformed_token_raises_auth_error(self):
        with pytest.raises(AuthError, match="Invalid token"):
            validate_token("Bearer not-a-jwt-token", SECRET)

    def test_wrong_signing_key_raises_auth_error(self, make_token):
        token = make_token(sub="attacker", scopes=["project:manage"], secret="wrong-secret")

        with pytest.raises(AuthError, match="Invalid token"):
            validate_token(f"Bearer {token}", SECRET)

    def test_expired_token_raises_auth_error(self, make_token):
        token = make_token(sub="alice", scopes=["project:manage"], exp_hours=-1)

        with pytest.raises(AuthError, match="Token has expired"):
            validate_token(f"Bearer {token}", SECRET)

    def test_token_without_exp_claim_raises_auth_error(self, make_token):
        token = make_token(sub="alice", scopes=["project:manage"], include_exp=False)

        with pytest.raises(AuthError, match="Invalid token"):
            validate_token(f"Bearer {token}", SECRET)

    def test_token_without_sub_claim_raises_auth_error(self, make_token):
        token = make_token(scopes=["project:manage"], include_sub=False)

        with pytest.raises(AuthError, match="Invalid token"):
            validate_token(f"Bearer {token}", SECRET)

    # ----- Scope claim -----

    def test_missing_scope_defaults_to_empty_list(self, make_token):
        token = make_token(sub="alice", scopes=None)

        assert validate_token(f"Bearer {token}", SECRET).scopes == []

    def test_space_delimited_scope_string_is_split(self, make_token):
        token = make_token(
            sub="alice", extra_claims={"scope": "project:manage mysql:manage"}
        )

        result = validate_token(f"Bearer {token}", SECRET)

        assert result.scopes == ["project:manage", "mysql:manage"]
        assert result.has_scope("mysql:manage")
        assert not result.has_scope("postgres:manage")

    def test_non_list_scope_raises_auth_error(self, make_token):
        token = make_token(sub="alice", extra_claims={"scope": {"project": "manage"}})

        with pytest.raises(AuthError, match="Invalid scope claim: must be a list"):
            validate_token(f"Bearer {token}", SECRET)

    def test_scope_with_non_string_entries_raises_auth_error(self, make_token):
        token = make_token(sub="alice", extra_claims={"scope": ["project:manage", 123]})

        with pytest.raises(AuthError, match="all entries must be strings"):
            validate_token(f"Bearer {token}", SECRET)


class TestGenerateToken:
    def test_minted_token_validates(self):
        token = generate_token("ci-agent", ["project:manage"], SECRET)

        result = validate_token(f"Bearer {token}", SECRET)

        assert result.subject == "ci-agent"
        assert result.scopes == ["project:manage"]

    def test_tools_resolve_to_their_scopes(self):
        scopes = resolve_scopes(["project:manage"], ["dokploy_mysql", "dokploy_project"], False)

        assert scopes == ["project:manage", "mysql:manage"]

    def test_all_tools_grants_every_scope(self):
        assert resolve_scopes([], [], True) == [
            "application:manage",
            "mysql:manage",
            "postgres:manage",
            "project:manage",
        ]

    @pytest.mark.parametrize(
        "scopes, tools",
        [(["compose:manage"], []), ([], ["dokploy_compose"])],
    )
    def test_unknown_names_are_rejected(self, scopes, tools):
        with pytest.raises(ValueError, match="unknown"):
            resolve_scopes(scopes, tools, False)
