"""
HTTP side of a chat cycle: one streaming POST per request.
"""
import logging
from typing import Any, AsyncIterator, Optional

import httpx

from core.config import ClientConfig
from core.errors import StreamEstablishError

logger = logging.getLogger(__name__)

ERROR_BODY_PREVIEW = 200


class ChatTransport:
    """
    Streams the raw SSE lines of a chat-completion response.

    Usable as an async context manager; the underlying httpx client is closed
    on exit unless it was passed in by the caller.
    """

    def __init__(self, config: ClientConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            timeout=httpx.Timeout(None, connect=config.connect_timeout),
        )

    async def __aenter__(self) -> 'ChatTransport':
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        return {
            'Authorization': f'Bearer {self.config.api_key}',
            'Content-Type': 'application/json',
        }

    async def stream_frames(self, payload: dict[str, Any]) -> AsyncIterator[bytes]:
        """
        POST the payload and yield every non-blank response line as bytes.

        Raises:
            StreamEstablishError: the request failed or returned an error status
        """
        request = self._client.build_request(
            'POST', self.config.url, json=payload, headers=self._headers(),
        )
        try:
            response = await self._client.send(request, stream=True)
        except httpx.HTTPError as exc:
            raise StreamEstablishError(
                f"Failed to send request. Check your Internet connection ({exc!r})"
            ) from exc

        try:
            if response.is_error:
                body = (await response.aread()).decode('utf-8', errors='replace')
                raise StreamEstablishError(
                    f"Request rejected with HTTP {response.status_code}: "
                    f"{body[:ERROR_BODY_PREVIEW]}"
                )

            logger.info("streaming %s from %s", payload.get('model'), self.config.url)
            try:
                async for line in response.aiter_lines():
                    if line:
                        yield line.encode('utf-8')
            except httpx.HTTPError as exc:
                logger.warning("stream interrupted: %r", exc)
        finally:
            await response.aclose()
