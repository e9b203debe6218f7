import asyncio
import base64
import io
from typing import List, Optional, Tuple

import pytest
from PIL import Image

from flipart.dal.kv_dal import KeyValueDAL
from flipart.models.artifact import AspectRatio
from flipart.models.gateway_models import GatewayRequest, GatewayResponse
from flipart.models.session_models import SessionProfile
from flipart.services.persistent_store import PersistentStore
from flipart.services.studio import Studio
from flipart.utils.database_init import AsyncDatabaseInitializer


def png_bytes(size=(8, 8), color=(200, 30, 30)) -> bytes:
    buf = io.BytesIO()
    Image.new("RGB", size, color).save(buf, format="PNG")
    return buf.getvalue()


def png_data_url(size=(8, 8)) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes(size)).decode("ascii")


class FakeGateway:
    """Records calls; `hold()` makes calls wait until `release()`."""

    def __init__(self, text: str = "Looks great.", image_ref: Optional[str] = None, error: Optional[Exception] = None):
        self.text = text
        self.image_ref = image_ref or png_data_url()
        self.error = error
        self.requests: List[GatewayRequest] = []
        self.image_calls: List[Tuple[str, AspectRatio]] = []
        self.gate: Optional[asyncio.Event] = None
        self.entered: Optional[asyncio.Event] = None

    def hold(self) -> None:
        self.gate = asyncio.Event()
        self.entered = asyncio.Event()

    def release(self) -> None:
        self.gate.set()

    async def _wait(self) -> None:
        if self.gate is not None:
            self.entered.set()
            await self.gate.wait()
        if self.error is not None:
            raise self.error

    async def generate(self, request: GatewayRequest) -> GatewayResponse:
        self.requests.append(request)
        await self._wait()
        return GatewayResponse(text=self.text)

    async def generate_image(self, prompt: str, aspect_ratio: AspectRatio) -> str:
        self.image_calls.append((prompt, aspect_ratio))
        await self._wait()
        return self.image_ref


@pytest.fixture
def db_initializer(tmp_path):
    return AsyncDatabaseInitializer(tmp_path)


@pytest.fixture
def store(db_initializer):
    return PersistentStore(KeyValueDAL(db_initializer))


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def studio_factory(gateway, store):
    def make(timeout=None, signed_in=True):
        studio = Studio(gateway, store, timeout=timeout)
        if signed_in:
            studio.session = SessionProfile(display_name="ada", email="ada@example.com")
        return studio

    return make


@pytest.fixture
def studio(studio_factory):
    return studio_factory()
