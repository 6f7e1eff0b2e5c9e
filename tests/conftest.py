import base64
import json

import pytest

NOW = 1_700_000_000.0


def _segment(obj) -> str:
    raw = json.dumps(obj).encode("utf-8")
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def build_token(payload) -> str:
    return ".".join([_segment({"alg": "HS256", "typ": "JWT"}), _segment(payload), "sig"])


@pytest.fixture
def make_token():
    def _make(exp, **claims):
        payload = {"exp": exp}
        payload.update(claims)
        return build_token(payload)

    return _make


@pytest.fixture
def clock():
    current = {"now": NOW}

    def now_fn():
        return current["now"]

    now_fn.state = current
    return now_fn
