"""Errors raised while fetching and caching news images"""


class NewsError(Exception):
    """Base class for all daily news errors"""


class InvalidDate(NewsError, ValueError):
    """A user supplied date is not a real YYYY-MM-DD calendar date"""

    def __init__(self, value: object):
        self.value = value
        super().__init__(f"Invalid date: {value!r}, expected YYYY-MM-DD")


class PayloadError(NewsError):
    """Upstream returned something that cannot be turned into an image"""


class UnrecognizedPayload(PayloadError):
    """Payload is neither an image nor a JSON document"""


class NoEmbeddedLink(PayloadError):
    """JSON payload does not contain any http link"""


class InvalidLinkedImage(PayloadError):
    """The link embedded in a JSON payload did not lead to an image"""

    def __init__(self, url: str):
        self.url = url
        super().__init__(f"Linked payload at {url} is not an image")


class StaleUpstream(NewsError):
    """Upstream served the same image as yesterday"""

    def __init__(self, date: str, digest: str):
        self.date = date
        self.digest = digest
        super().__init__(
            f"Upstream image for {date} is identical to the previous day "
            f"(sha256 {digest[:12]})"
        )
