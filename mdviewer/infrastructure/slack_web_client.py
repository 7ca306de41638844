"""
Slack Web API Client

Thin async client for the handful of Slack Web API calls this system makes,
built on httpx. No timeouts beyond the httpx client defaults are imposed here.
"""

import logging
from typing import Any, Dict, List, Optional, Type

import httpx

from mdviewer.domain.errors import DomainError, NotificationError, UpstreamFetchError
from mdviewer.domain.events import SharedFile

logger = logging.getLogger(__name__)

DEFAULT_API_BASE_URL = "https://slack.com/api"


class SlackWebClient:
    """
    Async Slack Web API client.

    One instance is shared by every workspace; the bot token is passed per
    call because each workspace has its own.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        api_base_url: str = DEFAULT_API_BASE_URL,
    ):
        """
        Args:
            http_client: Shared httpx client, closed by the process entry point
            api_base_url: Web API root
        """
        self.http = http_client
        self.api_base_url = api_base_url.rstrip("/")

    async def _call_api(
        self,
        method: str,
        token: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
        json_body: Optional[Dict[str, Any]] = None,
        auth: Optional[httpx.BasicAuth] = None,
        error_cls: Type[DomainError] = UpstreamFetchError,
    ) -> Dict[str, Any]:
        """
        Call a Web API method and return the decoded body.

        Raises:
            error_cls: On transport errors, non-2xx responses or "ok": false
        """
        headers = {}
        if token:
            headers["Authorization"] = f"Bearer {token}"

        try:
            response = await self.http.post(
                f"{self.api_base_url}/{method}",
                headers=headers,
                data=data,
                json=json_body,
                auth=auth,
            )
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPStatusError as e:
            raise error_cls(
                f"Slack {method} returned HTTP {e.response.status_code}", original_error=e
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise error_cls(f"Slack {method} failed: {e}", original_error=e) from e

        if not body.get("ok"):
            raise error_cls(f"Slack {method} error: {body.get('error', 'unknown_error')}")
        return body

    async def get_file_info(self, file_id: str, token: str) -> SharedFile:
        """
        Look up file metadata with files.info.

        Raises:
            UpstreamFetchError: If the call fails or the file object is incomplete
        """
        body = await self._call_api("files.info", token=token, data={"file": file_id})
        try:
            return SharedFile.from_api(body.get("file") or {})
        except ValueError as e:
            raise UpstreamFetchError(f"files.info returned an unusable file: {e}") from e

    async def download_file(self, url: str, token: str) -> str:
        """
        Download a private file using the bot token as bearer credential.

        Args:
            url: url_private_download of the file
            token: Bot token of the file's workspace

        Returns:
            Decoded file contents

        Raises:
            UpstreamFetchError: On transport errors or non-success status
        """
        try:
            response = await self.http.get(
                url,
                headers={"Authorization": f"Bearer {token}"},
                follow_redirects=True,
            )
        except httpx.HTTPError as e:
            raise UpstreamFetchError(f"Download failed: {e}", original_error=e) from e

        if not response.is_success:
            raise UpstreamFetchError(
                f"HTTP error! status: {response.status_code}",
                status_code=response.status_code,
            )
        return response.text

    async def post_message(
        self,
        token: str,
        channel: str,
        text: str,
        blocks: Optional[List[Dict[str, Any]]] = None,
    ) -> Dict[str, Any]:
        """
        Post a message with chat.postMessage.

        Raises:
            NotificationError: If Slack rejects the message
        """
        payload: Dict[str, Any] = {"channel": channel, "text": text}
        if blocks:
            payload["blocks"] = blocks
        return await self._call_api(
            "chat.postMessage", token=token, json_body=payload, error_cls=NotificationError
        )

    async def auth_test(self, token: str) -> Dict[str, Any]:
        """Identify the bot behind a token (team, user and bot ids)."""
        return await self._call_api("auth.test", token=token)

    async def exchange_oauth_code(
        self,
        code: str,
        client_id: str,
        client_secret: str,
        redirect_uri: Optional[str] = None,
    ) -> Dict[str, Any]:
        """
        Exchange an authorization code with oauth.v2.access.

        Returns:
            Decoded response including team and access_token
        """
        data = {"code": code}
        if redirect_uri:
            data["redirect_uri"] = redirect_uri
        return await self._call_api(
            "oauth.v2.access", data=data, auth=httpx.BasicAuth(client_id, client_secret)
        )
