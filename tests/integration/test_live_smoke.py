import logging
import os
from pathlib import Path

import pytest

from jwt_graphql import config_from_env, create_client


def _load_dotenv_if_present() -> None:
    env_path = Path(__file__).resolve().parents[2] / ".env"
    if not env_path.exists():
        return
    for raw in env_path.read_text(encoding="utf-8").splitlines():
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        if line.startswith("export "):
            line = line[len("export ") :].strip()
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        if not key or key in os.environ:
            continue
        value = value.strip()
        if (value.startswith('"') and value.endswith('"')) or (value.startswith("'") and value.endswith("'")):
            value = value[1:-1]
        os.environ[key] = value


@pytest.mark.asyncio
async def test_live_smoke(caplog):
    _load_dotenv_if_present()
    config = config_from_env()
    if config is None:
        pytest.skip("Integration credentials not provided")

    logger = logging.getLogger("jwt_graphql.integration")
    client = await create_client(
        config.domain,
        config.access_token,
        timeout_seconds=config.timeout_seconds,
        verify_ssl=config.verify_ssl,
        logger=logger,
    )
    async with client:
        with caplog.at_level(logging.DEBUG):
            data = await client.run("query { __typename }")

    assert data is not None
    assert client.storage.get() is not None
