"""Turn an upstream response body into image bytes

Some endpoints answer with the image itself, others with a JSON envelope
that points at the real image (short-link and redirect services). The
resolver follows exactly one such hop.
"""

import json
from collections.abc import Awaitable, Callable
from typing import Any

from loguru import logger

from .exceptions import InvalidLinkedImage, NoEmbeddedLink, UnrecognizedPayload
from .sniffer import classify, is_image

Fetch = Callable[[str], Awaitable[bytes]]


def find_embedded_link(document: Any) -> str | None:
    """Depth-first search for the first string value starting with ``http``

    Mappings are walked in key order and sequences in index order, so the
    result is deterministic for a given document. Keys themselves are not
    candidates.
    """
    if isinstance(document, str):
        return document if document.startswith("http") else None
    if isinstance(document, dict):
        children = document.values()
    elif isinstance(document, list):
        children = document
    else:
        # numbers, booleans, null
        return None

    for child in children:
        link = find_embedded_link(child)
        if link is not None:
            return link
    return None


class PayloadResolver:
    """Resolves raw upstream payloads to image bytes"""

    def parse_document(self, raw: bytes) -> Any:
        """Decode raw bytes as a UTF-8 JSON document

        Raises:
            UnrecognizedPayload: If raw is not UTF-8 JSON
        """
        try:
            return json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise UnrecognizedPayload(
                f"Payload of {len(raw)} bytes is neither an image nor JSON: {e}"
            ) from e

    async def resolve(self, raw: bytes, fetch: Fetch) -> bytes:
        """Return image bytes for raw, fetching an embedded link if needed

        Args:
            raw: Body of the upstream response
            fetch: Coroutine function retrieving the body of a URL

        Returns:
            Image bytes

        Raises:
            UnrecognizedPayload: raw is neither an image nor JSON
            NoEmbeddedLink: the JSON document has no http link
            InvalidLinkedImage: the linked payload is not an image
        """
        kind = classify(raw)
        if kind is not None:
            logger.debug(f"Payload is a direct {kind.value} image")
            return raw

        document = self.parse_document(raw)
        link = find_embedded_link(document)
        if link is None:
            raise NoEmbeddedLink("JSON payload does not contain an http link")

        logger.info(f"Following embedded image link {link}")
        linked = await fetch(link)
        if not is_image(linked):
            raise InvalidLinkedImage(link)
        return linked
