"""
Image-to-video generation with Veo.

Video jobs are long-running operations: the submission call returns a
handle, the handle is re-queried on a fixed interval until the operation
reports done, and the finished video is downloaded from the URI it exposes.

Polling is strictly sequential, the job is never resubmitted, and the
download starts only after a status check has reported completion.
"""

from __future__ import annotations

import asyncio
import binascii
import inspect
import logging
import os
import tempfile
import time
from collections.abc import Awaitable, Callable

import httpx
from google.genai import errors as genai_errors
from google.genai import types
from langfuse import observe
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from app.components.genai.genai_client_provider import GenAIClientProvider
from app.entities.errors import (
    DownloadError,
    EncodingError,
    ErrorKind,
    GenerationCancelledError,
    MissingInputError,
    NoResultURIError,
    PollingTimeoutError,
    PollingTransportError,
    SubmissionError,
    UpstreamError,
    classify_status_code,
)
from app.entities.generation_job import (
    SUPPORTED_ASPECT_RATIOS,
    AspectRatio,
    GenerationJob,
    VideoResource,
)
from app.entities.media import EncodedMedia
from app.services.VideoService.video_service_interface import (
    ProgressCallback,
    VideoServiceInterface,
)


MSG_STARTING = "Starting video generation..."
MSG_SUBMITTED = (
    "Operation initiated. Waiting for completion... This can take a few minutes."
)
MSG_CHECKING = "Checking operation status..."
MSG_COMPLETE = "Video generation complete!"
MSG_FETCHING = "Fetching video..."

DEFAULT_VIDEO_MIME_TYPE = "video/mp4"


def _is_transient(error: BaseException) -> bool:
    return isinstance(error, (httpx.TransportError, genai_errors.ServerError))


class VideoService(VideoServiceInterface):
    def __init__(
        self,
        client_provider: GenAIClientProvider,
        http_client: httpx.AsyncClient,
        model_name: str,
        logger: logging.Logger,
        resolution: str = "720p",
        poll_interval: float = 10.0,
        poll_timeout: float | None = 900.0,
        status_check_attempts: int = 1,
        status_check_wait: float = 1.0,
        download_timeout: float = 120.0,
        output_dir: str | None = None,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        """
        Initialize the video service.

        Args:
            client_provider: Source of the shared Gen AI client and API key
            http_client: Client used to download finished videos
            model_name: Veo model identifier
            logger: Logger instance
            resolution: Requested output resolution
            poll_interval: Fixed delay in seconds between status checks
            poll_timeout: Give up after this many seconds; None or 0 polls forever
            status_check_attempts: Attempts per status check before failing the job
            status_check_wait: Base delay for retried status checks
            download_timeout: Timeout in seconds for the final download
            output_dir: Directory for downloaded videos (system temp dir by default)
            clock: Monotonic time source used for the polling deadline
            sleep: Coroutine used to wait between status checks
        """
        self.client_provider = client_provider
        self.http_client = http_client
        self.model_name = model_name
        self.logger = logger
        self.resolution = resolution
        self.poll_interval = max(0.0, poll_interval)
        self.poll_timeout = poll_timeout or None
        self.status_check_attempts = max(1, status_check_attempts)
        self.status_check_wait = max(0.0, status_check_wait)
        self.download_timeout = download_timeout
        self.output_dir = output_dir
        self._clock = clock
        self._sleep = sleep

        self.logger.info(
            "VideoService initialized. Model: %s, poll interval: %ss, timeout: %s",
            self.model_name,
            self.poll_interval,
            f"{self.poll_timeout}s" if self.poll_timeout else "none",
        )

    @observe(capture_input=False, capture_output=False)
    async def generate(
        self,
        image: EncodedMedia | None,
        prompt: str,
        aspect_ratio: AspectRatio = "16:9",
        on_progress: ProgressCallback | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> VideoResource:
        if not prompt or not prompt.strip():
            raise MissingInputError("A prompt is required to generate a video")
        if image is None or not image.data:
            raise MissingInputError("An image is required to generate a video")
        if aspect_ratio not in SUPPORTED_ASPECT_RATIOS:
            raise MissingInputError(
                f"Unsupported aspect ratio {aspect_ratio!r}, expected one of "
                f"{', '.join(SUPPORTED_ASPECT_RATIOS)}"
            )

        await self._emit(on_progress, MSG_STARTING)
        operation = await self._submit(image, prompt, aspect_ratio)

        job = GenerationJob(name=operation.name or "")
        self._update_job(job, operation)
        self.logger.info("Video job %s submitted (done: %s)", job.name, job.done)
        await self._emit(on_progress, MSG_SUBMITTED)

        deadline = self._clock() + self.poll_timeout if self.poll_timeout else None

        while not job.done:
            self._check_cancelled(cancel_event, job)
            if deadline is not None and self._clock() >= deadline:
                self.logger.error(
                    "Video job %s timed out after %d status checks",
                    job.name,
                    job.status_checks,
                )
                raise PollingTimeoutError(job.name, self.poll_timeout or 0, job.status_checks)

            await self._sleep(self.poll_interval)
            self._check_cancelled(cancel_event, job)

            await self._emit(on_progress, MSG_CHECKING)
            operation = await self._check_status(operation, job)
            self._update_job(job, operation)

        await self._emit(on_progress, MSG_COMPLETE)

        if not job.result_uri:
            self.logger.error(
                "Video job %s finished without a result: %s", job.name, job.error
            )
            raise NoResultURIError(job.name, job.error)

        await self._emit(on_progress, MSG_FETCHING)
        return await self._download(job)

    async def _submit(
        self, image: EncodedMedia, prompt: str, aspect_ratio: str
    ) -> types.GenerateVideosOperation:
        try:
            image_bytes = image.raw_bytes()
        except (binascii.Error, ValueError) as e:
            raise EncodingError(f"Malformed image payload: {e}") from e

        config = types.GenerateVideosConfig(
            number_of_videos=1,
            resolution=self.resolution,
            aspect_ratio=aspect_ratio,
        )

        try:
            client = self.client_provider.client
            return await client.aio.models.generate_videos(
                model=self.model_name,
                prompt=prompt,
                image=types.Image(image_bytes=image_bytes, mime_type=image.mime_type),
                config=config,
            )
        except UpstreamError as e:
            raise SubmissionError(e.message, e.kind, e.status_code) from e
        except (genai_errors.APIError, httpx.HTTPError) as e:
            # A key without access to the model surfaces as "entity not found".
            upstream = UpstreamError.from_exception(e, not_found_is_auth=True)
            self.logger.error("Video submission failed (%s): %s", upstream.kind.value, e)
            raise SubmissionError(
                upstream.message, upstream.kind, upstream.status_code
            ) from e

    async def _check_status(
        self, operation: types.GenerateVideosOperation, job: GenerationJob
    ) -> types.GenerateVideosOperation:
        client = self.client_provider.client
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.status_check_attempts),
            wait=wait_exponential_jitter(
                initial=self.status_check_wait,
                max=self.status_check_wait * 8,
                jitter=self.status_check_wait,
            ),
            retry=retry_if_exception(_is_transient),
            before_sleep=self._log_status_retry,
            reraise=True,
        )

        try:
            async for attempt in retrying:
                with attempt:
                    job.status_checks += 1
                    return await client.aio.operations.get(operation)
        except (genai_errors.APIError, httpx.HTTPError) as e:
            upstream = UpstreamError.from_exception(e)
            self.logger.error(
                "Status check %d for video job %s failed: %s",
                job.status_checks,
                job.name,
                e,
            )
            raise PollingTransportError(
                upstream.message, upstream.kind, upstream.status_code
            ) from e

        raise PollingTransportError(f"Status check for job {job.name} did not run")

    def _log_status_retry(self, retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        self.logger.warning(
            "Status check attempt %d failed, retrying: %s",
            retry_state.attempt_number,
            outcome.exception() if outcome else "unknown error",
        )

    def _update_job(
        self, job: GenerationJob, operation: types.GenerateVideosOperation
    ) -> None:
        job.done = bool(operation.done)
        if not job.done:
            return

        if operation.error:
            error = operation.error
            message = error.get("message") if isinstance(error, dict) else None
            job.error = str(message or error)

        response = operation.response
        videos = response.generated_videos if response else None
        if videos and videos[0].video and videos[0].video.uri:
            job.result_uri = videos[0].video.uri

    async def _download(self, job: GenerationJob) -> VideoResource:
        uri = job.result_uri or ""
        api_key = self.client_provider.api_key
        headers = {"x-goog-api-key": api_key} if api_key else {}

        try:
            response = await self.http_client.get(
                uri,
                headers=headers,
                follow_redirects=True,
                timeout=self.download_timeout,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            self.logger.error("Video download for job %s returned %s", job.name, status)
            raise DownloadError(
                f"Failed to fetch video: {e.response.reason_phrase or status}",
                kind=classify_status_code(status),
                status_code=status,
            ) from e
        except httpx.HTTPError as e:
            self.logger.error("Video download for job %s failed: %s", job.name, e)
            raise DownloadError(
                f"Failed to fetch video: {e}", kind=ErrorKind.TRANSPORT
            ) from e

        content = response.content
        mime_type = (
            response.headers.get("content-type", DEFAULT_VIDEO_MIME_TYPE)
            .split(";")[0]
            .strip()
        ) or DEFAULT_VIDEO_MIME_TYPE

        try:
            path = await asyncio.to_thread(self._write_video_file, content)
        except OSError as e:
            raise DownloadError(f"Failed to store video: {e}") from e

        self.logger.info(
            "Video job %s downloaded: %d bytes -> %s", job.name, len(content), path
        )
        return VideoResource(
            path=path, mime_type=mime_type, source_uri=uri, size_bytes=len(content)
        )

    def _write_video_file(self, content: bytes) -> str:
        fd, path = tempfile.mkstemp(
            prefix="studio-video-", suffix=".mp4", dir=self.output_dir
        )
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(content)
        except OSError:
            os.unlink(path)
            raise
        return path

    def _check_cancelled(
        self, cancel_event: asyncio.Event | None, job: GenerationJob
    ) -> None:
        if cancel_event is not None and cancel_event.is_set():
            self.logger.info(
                "Video job %s cancelled after %d status checks",
                job.name,
                job.status_checks,
            )
            raise GenerationCancelledError(job.name)

    async def _emit(self, on_progress: ProgressCallback | None, message: str) -> None:
        self.logger.info("Video generation: %s", message)
        if on_progress is None:
            return
        result = on_progress(message)
        if inspect.isawaitable(result):
            await result
