from abc import ABC, abstractmethod

from app.entities.media import EncodedMedia


class ImageServiceInterface(ABC):
    @abstractmethod
    async def transform_image(
        self, image: EncodedMedia | None, instruction: str
    ) -> EncodedMedia:
        """
        Apply a free-text instruction to an image and return the result.

        Raises:
            MissingInputError: If the image or the instruction is missing
            NoImageReturnedError: If the response carries no image part
            UpstreamError: On transport, auth or quota failures
        """
