"""
Tests for the google-genai backed Veo client
"""

from types import SimpleNamespace

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

from veoforge.config import VeoSettings
from veoforge.core import PollError
from veoforge.models import Quality
from veoforge.services.infrastructure.veo import VeoClient, create_genai_client


def finished_operation(uri="https://example.com/video.mp4", thumbnail=None):
    video = SimpleNamespace(uri=uri, thumbnail_uri=thumbnail)
    return SimpleNamespace(
        name="operations/abc",
        done=True,
        error=None,
        response=SimpleNamespace(generated_videos=[SimpleNamespace(video=video)]),
    )


@pytest.fixture
def genai_client():
    client = MagicMock()
    client.aio.models.generate_videos = AsyncMock(
        return_value=SimpleNamespace(name="operations/abc", done=False)
    )
    client.aio.operations.get = AsyncMock()
    client.files.download = MagicMock(return_value=b"mp4-bytes")
    return client


@pytest.fixture
def veo_client(genai_client):
    settings = VeoSettings(gemini_api_key="mock-key", model_standard="veo-fast", model_high="veo-full")
    return VeoClient(settings=settings, client=genai_client)


class TestCreateGenaiClient:
    def test_api_key_backend(self):
        with patch("google.genai.Client") as mock_client:
            create_genai_client(VeoSettings(gemini_api_key="k"))

        mock_client.assert_called_once_with(api_key="k")

    def test_vertex_backend(self):
        settings = VeoSettings(use_vertex_ai=True, gcp_project_id="proj", gcp_location="europe-west4")

        with patch("google.genai.Client") as mock_client:
            create_genai_client(settings)

        mock_client.assert_called_once_with(vertexai=True, project="proj", location="europe-west4")

    def test_missing_api_key(self):
        with pytest.raises(ValueError, match="GEMINI_API_KEY"):
            create_genai_client(VeoSettings(gemini_api_key=None))

    def test_missing_project(self):
        with pytest.raises(ValueError, match="GCP_PROJECT_ID"):
            create_genai_client(VeoSettings(use_vertex_ai=True))


class TestSubmit:
    @pytest.mark.asyncio
    async def test_submit_returns_operation(self, veo_client, genai_client):
        result = await veo_client.submit("A presenter waves.", Quality.HIGH)

        assert result.id == "operations/abc"
        assert result.operation_handle.name == "operations/abc"
        kwargs = genai_client.aio.models.generate_videos.call_args.kwargs
        assert kwargs["model"] == "veo-full"
        assert kwargs["prompt"] == "A presenter waves."
        assert kwargs["config"].aspect_ratio == "16:9"
        assert kwargs["config"].number_of_videos == 1

    @pytest.mark.asyncio
    async def test_standard_quality_uses_fast_model(self, veo_client, genai_client):
        await veo_client.submit("prompt", Quality.STANDARD)

        assert genai_client.aio.models.generate_videos.call_args.kwargs["model"] == "veo-fast"

    @pytest.mark.asyncio
    async def test_upstream_error_propagates(self, veo_client, genai_client):
        genai_client.aio.models.generate_videos.side_effect = RuntimeError("429 RESOURCE_EXHAUSTED")

        with pytest.raises(RuntimeError, match="429"):
            await veo_client.submit("prompt", Quality.STANDARD)

    @pytest.mark.asyncio
    async def test_missing_operation_name(self, veo_client, genai_client):
        genai_client.aio.models.generate_videos.return_value = SimpleNamespace(name=None, done=False)

        with pytest.raises(RuntimeError, match="no operation name"):
            await veo_client.submit("prompt", Quality.STANDARD)


class TestPoll:
    @pytest.mark.asyncio
    async def test_pending(self, veo_client, genai_client):
        pending = SimpleNamespace(name="operations/abc", done=False)
        genai_client.aio.operations.get.return_value = pending

        result = await veo_client.poll("handle")

        assert result.done is False
        assert result.result_uri is None
        assert result.operation_handle is pending
        genai_client.aio.operations.get.assert_awaited_once_with("handle")

    @pytest.mark.asyncio
    async def test_done_with_video(self, veo_client, genai_client):
        genai_client.aio.operations.get.return_value = finished_operation(thumbnail="https://example.com/t.jpg")

        result = await veo_client.poll("handle")

        assert result.done is True
        assert result.result_uri == "https://example.com/video.mp4"
        assert result.thumbnail_uri == "https://example.com/t.jpg"

    @pytest.mark.asyncio
    async def test_done_without_video(self, veo_client, genai_client):
        genai_client.aio.operations.get.return_value = SimpleNamespace(
            name="operations/abc",
            done=True,
            error={"message": "filtered by safety"},
            response=SimpleNamespace(generated_videos=[]),
        )

        result = await veo_client.poll("handle")

        assert result.done is True
        assert result.result_uri is None
        assert "filtered by safety" in result.error

    @pytest.mark.asyncio
    async def test_poll_error_is_wrapped(self, veo_client, genai_client):
        genai_client.aio.operations.get.side_effect = ConnectionError("socket closed")

        with pytest.raises(PollError, match="socket closed") as exc_info:
            await veo_client.poll("handle")

        assert isinstance(exc_info.value.__cause__, ConnectionError)


class TestDownload:
    @pytest.mark.asyncio
    async def test_download(self, veo_client, genai_client):
        data = await veo_client.download("https://example.com/video.mp4")

        assert data == b"mp4-bytes"
        file_arg = genai_client.files.download.call_args.kwargs["file"]
        assert file_arg.uri == "https://example.com/video.mp4"


def test_client_is_created_lazily():
    settings = VeoSettings(gemini_api_key="k")
    with patch("veoforge.services.infrastructure.veo.client.create_genai_client") as factory:
        client = VeoClient(settings=settings)
        factory.assert_not_called()

        assert client.client is factory.return_value
        assert client.client is factory.return_value
        factory.assert_called_once_with(settings)
