import httpx
import pytest
import pytest_asyncio
from PIL import Image

from recipe_finder.recipes.fetcher import RecipeFetcher


@pytest.fixture
def image():
    return Image.new("RGB", (32, 32), (240, 200, 40))


@pytest.fixture
def image_file(tmp_path, image):
    path = tmp_path / "fruit.jpg"
    image.save(path)
    return path


@pytest_asyncio.fixture
async def make_fetcher():
    """Build fetchers backed by ``httpx.MockTransport``; clients are closed afterwards."""
    clients = []

    def factory(handler, **kwargs) -> RecipeFetcher:
        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        clients.append(client)
        return RecipeFetcher(client=client, **kwargs)

    yield factory

    for client in clients:
        await client.aclose()
