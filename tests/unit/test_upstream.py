"""
Unit tests for the Mars Rover Photos API adapter
"""

import pytest
import os
import sys

import httpx

# Add project root to path
project_root = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
sys.path.append(project_root)

from picture_service.errors import ImageFetchError, UpstreamError
from picture_service.upstream import DEFAULT_BASE_URL, MarsPhotosApi, UrlBuilder, redact


def _client(handler):
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestUrlBuilder:
    """Test cases for UrlBuilder"""

    def test_build_url(self):
        urls = UrlBuilder(api_key="KEY")
        assert urls("Curiosity", "2015-12-30") == (
            f"{DEFAULT_BASE_URL}/rovers/curiosity/photos?earth_date=2015-12-30&api_key=KEY"
        )

    def test_date_embedded_verbatim(self):
        """No validation: whatever the caller passes goes into the URL"""
        urls = UrlBuilder(api_key="KEY", base_url="http://mirror.local/api/")
        assert urls.build_url("spirit", "15-12-30") == (
            "http://mirror.local/api/rovers/spirit/photos?earth_date=15-12-30&api_key=KEY"
        )

    def test_redact(self):
        assert redact("http://x/photos?earth_date=2015-12-30&api_key=SECRET") == (
            "http://x/photos?earth_date=2015-12-30&api_key=***"
        )


class TestMarsPhotosApi:
    """Test cases for MarsPhotosApi"""

    @pytest.mark.asyncio
    async def test_get_photos(self):
        seen = []

        def handler(request):
            seen.append(request.url)
            return httpx.Response(200, json={"photos": [{"img_src": "http://img/1.jpg", "id": 1}]})

        async with _client(handler) as client:
            api = MarsPhotosApi(api_key="KEY", client=client)
            photos = await api.get_photos_at(api.urls("Curiosity", "2015-12-30"))

        assert photos == [{"img_src": "http://img/1.jpg", "id": 1}]
        assert seen[0].path == "/mars-photos/api/v1/rovers/curiosity/photos"
        assert seen[0].params["earth_date"] == "2015-12-30"
        assert seen[0].params["api_key"] == "KEY"

    @pytest.mark.asyncio
    async def test_get_photos_follows_redirect(self):
        """A 3xx from the listing endpoint is followed to its Location"""
        def handler(request):
            if request.url.host == "old.test":
                return httpx.Response(301, headers={"Location": "http://new.test/api/rovers/curiosity/photos"})
            return httpx.Response(200, json={"photos": [{"img_src": "http://img/1.jpg"}]})

        async with _client(handler) as client:
            api = MarsPhotosApi(api_key="KEY", client=client, base_url="http://old.test/api")
            photos = await api.get_photos_at(api.urls("curiosity", "2015-12-30"))

        assert photos == [{"img_src": "http://img/1.jpg"}]

    @pytest.mark.asyncio
    async def test_get_photos_http_error(self):
        def handler(request):
            return httpx.Response(403, text="API_KEY_INVALID")

        async with _client(handler) as client:
            api = MarsPhotosApi(api_key="SECRET", client=client)
            with pytest.raises(UpstreamError) as exc:
                await api.get_photos_at(api.urls("curiosity", "2015-12-30"))

        assert exc.value.status_code == 403
        assert "SECRET" not in exc.value.url
        assert not isinstance(exc.value, ImageFetchError)

    @pytest.mark.asyncio
    async def test_get_photos_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(handler) as client:
            api = MarsPhotosApi(api_key="KEY", client=client)
            with pytest.raises(UpstreamError, match="connection refused"):
                await api.get_photos_at(api.urls("curiosity", "2015-12-30"))

    @pytest.mark.asyncio
    async def test_get_photos_missing_photos_key(self):
        def handler(request):
            return httpx.Response(200, json={"errors": "nope"})

        async with _client(handler) as client:
            api = MarsPhotosApi(api_key="KEY", client=client)
            with pytest.raises(UpstreamError, match="photos"):
                await api.get_photos_at(api.urls("curiosity", "2015-12-30"))

    @pytest.mark.asyncio
    async def test_get_photos_non_json(self):
        def handler(request):
            return httpx.Response(200, text="<html>maintenance</html>")

        async with _client(handler) as client:
            api = MarsPhotosApi(api_key="KEY", client=client)
            with pytest.raises(UpstreamError, match="non-JSON"):
                await api.get_photos_at(api.urls("curiosity", "2015-12-30"))

    @pytest.mark.asyncio
    async def test_get_image(self):
        def handler(request):
            return httpx.Response(200, content=b"\xff\xd8jpeg")

        async with _client(handler) as client:
            api = MarsPhotosApi(api_key="KEY", client=client)
            assert await api.get_image("http://img/1.jpg") == b"\xff\xd8jpeg"

    @pytest.mark.asyncio
    async def test_get_image_failure(self):
        def handler(request):
            return httpx.Response(404)

        async with _client(handler) as client:
            api = MarsPhotosApi(api_key="KEY", client=client)
            with pytest.raises(ImageFetchError) as exc:
                await api.get_image("http://img/missing.jpg")

        assert exc.value.status_code == 404
        assert exc.value.url == "http://img/missing.jpg"
