"""Image format detection from magic bytes"""

from enum import Enum


class ImageKind(str, Enum):
    """Image formats recognised by their leading bytes"""

    JPEG = "jpeg"
    PNG = "png"
    GIF = "gif"
    WEBP = "webp"


SIGNATURES: list[tuple[bytes, ImageKind]] = [
    (b"\xff\xd8\xff", ImageKind.JPEG),
    (b"\x89PNG", ImageKind.PNG),
    (b"GIF", ImageKind.GIF),
    (b"RIFF", ImageKind.WEBP),
]

_HEADER_SIZE = max(len(signature) for signature, _ in SIGNATURES)


def classify(buffer: bytes) -> ImageKind | None:
    """Return the image kind of buffer, or None if it is not a known image"""
    header = bytes(buffer[:_HEADER_SIZE])
    for signature, kind in SIGNATURES:
        if header.startswith(signature):
            return kind
    return None


def is_image(buffer: bytes) -> bool:
    return classify(buffer) is not None
