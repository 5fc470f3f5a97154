"""
Shared fixtures: a fake ArcGIS REST service behind ``httpx.MockTransport``.

The fake records every outbound request so tests can assert on the exact
query string and on how many calls were made.
"""
from typing import Any, List, Optional

import httpx
import pytest


class FakeArcGIS:
    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.payload: Any = {}
        self.status = 200
        self.raw: Optional[bytes] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.raw is not None:
            return httpx.Response(self.status, content=self.raw)
        return httpx.Response(self.status, json=self.payload)

    @property
    def last_params(self) -> dict:
        return dict(self.requests[-1].url.params)

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def arcgis():
    return FakeArcGIS()


@pytest.fixture
async def client(arcgis):
    async with arcgis.client() as c:
        yield c


def feature(x=None, y=None, **attrs):
    f = {"attributes": attrs}
    if x is not None and y is not None:
        f["geometry"] = {"x": x, "y": y}
    return f
