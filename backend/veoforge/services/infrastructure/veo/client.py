"""
Veo client - submit, poll and download video generations via google-genai.

Works with both backends google-genai supports:
1. Gemini API (using an API key)
2. Vertex AI (using GCP project credentials)

Environment Variables:
    USE_VERTEX_AI: Set to 'true' to use Vertex AI instead of the Gemini API
    GEMINI_API_KEY: API key for the Gemini API (when USE_VERTEX_AI=false)
    GCP_PROJECT_ID: GCP project ID (when USE_VERTEX_AI=true)
    GCP_LOCATION: GCP region (default: us-central1)
"""

import asyncio
from typing import Any, Optional

from veoforge.config import VeoSettings, load_settings
from veoforge.core import PollError, get_logger
from veoforge.models import Quality

from .base import PollClient, PollResult, SubmissionClient, SubmissionResult, VideoDownloader

logger = get_logger(__name__, component="veo_client")


def create_genai_client(settings: VeoSettings):
    """Create a google-genai client for the configured backend."""
    from google import genai

    if settings.use_vertex_ai:
        if not settings.gcp_project_id:
            raise ValueError("GCP_PROJECT_ID environment variable is required when USE_VERTEX_AI=true")
        logger.info(
            f"Vertex AI client initialized (project={settings.gcp_project_id}, location={settings.gcp_location})"
        )
        return genai.Client(
            vertexai=True,
            project=settings.gcp_project_id,
            location=settings.gcp_location,
        )

    if not settings.gemini_api_key:
        raise ValueError("GEMINI_API_KEY environment variable is required when USE_VERTEX_AI=false")
    logger.info("Gemini API client initialized")
    return genai.Client(api_key=settings.gemini_api_key)


class VeoClient(SubmissionClient, PollClient, VideoDownloader):
    """
    Upstream collaborator for the orchestrator.

    Usage:
        client = VeoClient()
        submission = await client.submit(prompt, Quality.STANDARD)
        state = await client.poll(submission.operation_handle)
        video = await client.download(state.result_uri)
    """

    def __init__(self, settings: Optional[VeoSettings] = None, client: Any = None):
        self.settings = settings or load_settings()
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = create_genai_client(self.settings)
        return self._client

    async def submit(self, prompt: str, quality: Quality) -> SubmissionResult:
        from google.genai import types

        model = self.settings.model_for(quality)
        logger.info(
            f"Submitting video generation to {model}",
            extra={"quality": quality.value, "prompt_preview": prompt[:100]},
        )

        operation = await self.client.aio.models.generate_videos(
            model=model,
            prompt=prompt,
            config=types.GenerateVideosConfig(
                aspect_ratio=self.settings.aspect_ratio,
                number_of_videos=1,
            ),
        )
        if not getattr(operation, "name", None):
            raise RuntimeError(f"Video generation on {model} returned no operation name")

        logger.info(f"Video generation operation started: {operation.name}")
        return SubmissionResult(id=operation.name, operation_handle=operation, thumbnail=None)

    async def poll(self, operation_handle: Any) -> PollResult:
        try:
            operation = await self.client.aio.operations.get(operation_handle)
        except Exception as e:
            raise PollError(str(e)) from e

        if not operation.done:
            return PollResult(done=False, operation_handle=operation)

        error = getattr(operation, "error", None)
        response = getattr(operation, "response", None) or getattr(operation, "result", None)
        generated = list(getattr(response, "generated_videos", None) or [])
        if not generated or generated[0].video is None:
            return PollResult(
                done=True,
                operation_handle=operation,
                error=str(error) if error else None,
            )

        video = generated[0].video
        return PollResult(
            done=True,
            result_uri=video.uri,
            thumbnail_uri=getattr(video, "thumbnail_uri", None),
            operation_handle=operation,
        )

    async def download(self, uri: str) -> bytes:
        from google.genai import types

        logger.info(f"Downloading video from {uri}")
        data = await asyncio.to_thread(self.client.files.download, file=types.Video(uri=uri))
        logger.info(f"Video downloaded successfully, size: {len(data)} bytes")
        return data
