from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Any, List, Optional


def _add_project_to_syspath() -> None:
    project_root = Path(__file__).resolve().parents[1]
    sys.path.insert(0, str(project_root))


_add_project_to_syspath()

from jwt_graphql import (  # noqa: E402
    AuthError,
    GraphQLError,
    SerializationError,
    TransportError,
    config_from_env,
    create_client,
)


def _read_query(raw: str) -> str:
    if raw.startswith("@"):
        return Path(raw[1:]).read_text(encoding="utf-8")
    return raw


async def _run(config, query: str, variables: Optional[dict]) -> Any:
    client = await create_client(
        config.domain,
        config.access_token,
        timeout_seconds=config.timeout_seconds,
        verify_ssl=config.verify_ssl,
    )
    async with client:
        return await client.run(query, variables)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Run one GraphQL operation against a JWT-protected endpoint."
    )
    parser.add_argument("query", help="Query text, or @path to read it from a file")
    parser.add_argument("--variables", default=None, help="Variables as a JSON object")
    args = parser.parse_args(argv)

    try:
        config = config_from_env()
    except ValueError as exc:
        print(str(exc), file=sys.stderr)
        return 2
    if config is None:
        print(
            "Missing configuration. Set JWT_GRAPHQL_DOMAIN and JWT_GRAPHQL_ACCESS_TOKEN.",
            file=sys.stderr,
        )
        return 2

    variables = None
    if args.variables:
        try:
            variables = json.loads(args.variables)
        except json.JSONDecodeError as exc:
            print(f"--variables is not valid JSON: {exc}", file=sys.stderr)
            return 2
        if not isinstance(variables, dict):
            print("--variables must be a JSON object", file=sys.stderr)
            return 2

    try:
        query = _read_query(args.query)
    except OSError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    try:
        data = asyncio.run(_run(config, query, variables))
    except (AuthError, GraphQLError, SerializationError, TransportError) as exc:
        print(f"{type(exc).__name__}: {exc}", file=sys.stderr)
        return 1
    print(json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
