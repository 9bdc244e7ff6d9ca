import asyncio
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

from app.entities.generation_job import AspectRatio, VideoResource
from app.entities.media import EncodedMedia

# Receives human-readable progress text; may be a plain or a coroutine function.
ProgressCallback = Callable[[str], Awaitable[None] | None]


class VideoServiceInterface(ABC):
    @abstractmethod
    async def generate(
        self,
        image: EncodedMedia | None,
        prompt: str,
        aspect_ratio: AspectRatio = "16:9",
        on_progress: ProgressCallback | None = None,
        cancel_event: asyncio.Event | None = None,
    ) -> VideoResource:
        """
        Submit an image-to-video job, poll it until it finishes and download the result.

        Args:
            image: Source image
            prompt: Description of the motion to generate
            aspect_ratio: "16:9" or "9:16"
            on_progress: Called with a status message at every phase
            cancel_event: When set, polling stops at the next tick

        Returns:
            A local video resource the caller must release when done with it

        Raises:
            MissingInputError: If the image or prompt is missing
            SubmissionError: If the job could not be submitted
            PollingTransportError: If a status check failed
            PollingTimeoutError: If the job did not finish in time
            NoResultURIError: If the job finished without a video
            DownloadError: If the video could not be fetched
            GenerationCancelledError: If cancel_event was set
        """
