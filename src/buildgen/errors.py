"""
Exceptions raised by the image pipeline.

Everything else in buildgen degrades to an empty instruction list and logs a
warning instead of raising. Image sources are the exception: without pixel
data there is nothing to approximate, so callers get a typed failure and can
fall back to another source.
"""


class ImageSourceError(Exception):
    """Base class for image fetch/decode failures."""

    def __init__(self, source: str, message: str):
        self.source = source
        super().__init__(f"{source}: {message}")


class FetchError(ImageSourceError):
    """The image source could not be reached or returned an error status."""


class FetchTimeout(FetchError):
    """The fetch did not complete within the caller's timeout."""


class DecodeError(ImageSourceError):
    """The fetched bytes are not a decodable image."""
