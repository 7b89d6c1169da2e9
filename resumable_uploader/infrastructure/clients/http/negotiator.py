"""
Resume offset negotiation over HTTP.
"""

import logging

from ....core.exceptions import ResumeQueryFailed, UploadError
from ....core.interfaces.clients import IUploadServerClient
from ....core.interfaces.upload import IResumeNegotiator

logger = logging.getLogger(__name__)


class HttpResumeNegotiator(IResumeNegotiator):
    """
    Asks the server how many bytes of a file it already holds.

    Fails open: an unreachable server, an error status or a body that is not
    a non-negative decimal integer all resolve to offset 0. Each fallback is
    logged as a warning so that server errors do not go unnoticed.
    """

    def __init__(self, client: IUploadServerClient) -> None:
        self._client = client

    async def resolve(self, filename: str) -> int:
        try:
            offset = await self._query(filename)
        except ResumeQueryFailed as e:
            logger.warning(f"{e.message}; uploading from the beginning")
            return 0

        logger.debug(f"Server holds {offset} bytes of {filename}")
        return offset

    async def _query(self, filename: str) -> int:
        try:
            body = await self._client.fetch_offset(filename)
        except UploadError as e:
            raise ResumeQueryFailed(filename, e.message) from e

        return parse_offset(filename, body)


def parse_offset(filename: str, body: str) -> int:
    """
    Parse a status response body into a byte offset.

    Raises:
        ResumeQueryFailed: If the body is not a non-negative decimal integer
    """
    text = body.strip()
    if not text.isascii() or not text.isdigit():
        raise ResumeQueryFailed(filename, f"unexpected status body {text[:64]!r}")
    return int(text)
