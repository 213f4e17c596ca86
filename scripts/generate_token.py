"""
Mint JWTs for a Dokploy MCP server running with DOKPLOY_AUTH_ENABLED=true.

Scopes can be given directly (--scope) or derived from the tools the token
should unlock (--tool). The signing secret and algorithm default to the
server's own DOKPLOY_JWT_SECRET_KEY / DOKPLOY_JWT_ALGORITHM, read from the
environment or .env.

    # Only dokploy_project
    python -m scripts.generate_token --sub ci-agent --tool dokploy_project

    # Applications plus both databases, valid for 2 hours
    python -m scripts.generate_token --sub deploy-bot \\
        --scope application:manage mysql:manage postgres:manage --exp-hours 2

    # Every tool
    python -m scripts.generate_token --sub admin --all-tools

Connect an MCP client with the token:

    claude mcp add --transport http dokploy http://localhost:8080/mcp \\
      --header "Authorization: Bearer <token>"
"""

import argparse
import datetime

import jwt

from dokploy_mcp.config import settings
from dokploy_mcp.tools import TOOL_SCOPE_MAP

KNOWN_SCOPES = sorted(set(TOOL_SCOPE_MAP.values()))


def generate_token(
    subject: str,
    scopes: list[str],
    secret: str,
    algorithm: str = "HS256",
    exp_hours: float = 8.0,
) -> str:
    """Sign a token for subject carrying scopes; negative exp_hours gives an expired one."""
    issued_at = datetime.datetime.now(datetime.timezone.utc)
    claims = {
        "sub": subject,
        "scope": scopes,
        "iat": issued_at,
        "exp": issued_at + datetime.timedelta(hours=exp_hours),
    }
    return jwt.encode(claims, secret, algorithm=algorithm)


def resolve_scopes(scopes: list[str], tools: list[str], all_tools: bool) -> list[str]:
    """
    Merge explicit scopes with the scopes the requested tools need.

    Raises:
        ValueError: For a scope or tool name the server doesn't know
    """
    if all_tools:
        return list(KNOWN_SCOPES)

    unknown_tools = [tool for tool in tools if tool not in TOOL_SCOPE_MAP]
    if unknown_tools:
        raise ValueError(f"unknown tool(s): {', '.join(unknown_tools)}")
    unknown_scopes = [scope for scope in scopes if scope not in KNOWN_SCOPES]
    if unknown_scopes:
        raise ValueError(f"unknown scope(s): {', '.join(unknown_scopes)}")

    resolved: list[str] = []
    for scope in [*scopes, *(TOOL_SCOPE_MAP[tool] for tool in tools)]:
        if scope not in resolved:
            resolved.append(scope)
    return resolved


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Generate JWT tokens for the Dokploy MCP server.",
        epilog=(
            f"Known scopes: {', '.join(KNOWN_SCOPES)}. "
            f"Known tools: {', '.join(sorted(TOOL_SCOPE_MAP))}."
        ),
    )
    parser.add_argument("--sub", required=True, help="Subject claim, e.g. 'ci-agent'")
    parser.add_argument("--scope", nargs="+", default=[], help="Scopes to grant")
    parser.add_argument("--tool", nargs="+", default=[], help="Tools to unlock")
    parser.add_argument("--all-tools", action="store_true", help="Grant every known scope")
    parser.add_argument(
        "--secret",
        default=settings.jwt_secret_key,
        help="Signing secret (default: DOKPLOY_JWT_SECRET_KEY)",
    )
    parser.add_argument(
        "--algorithm",
        default=settings.jwt_algorithm,
        help="Signing algorithm (default: DOKPLOY_JWT_ALGORITHM)",
    )
    parser.add_argument(
        "--exp-hours",
        type=float,
        default=8.0,
        help="Hours until the token expires; negative mints an expired token (default: 8)",
    )
    args = parser.parse_args()

    try:
        scopes = resolve_scopes(args.scope, args.tool, args.all_tools)
    except ValueError as e:
        parser.error(str(e))

    token = generate_token(args.sub, scopes, args.secret, args.algorithm, args.exp_hours)

    print(f"Subject:    {args.sub}")
    print(f"Scopes:     {' '.join(scopes) or '(none)'}")
    print(f"Expires in: {args.exp_hours:g}h")
    print()
    print(token)


if __name__ == "__main__":
    main()
