"""
RCS Callback Client.

Posts container task events to the robotic control system:
- CONTAINER_TASK_CREATE / CONTAINER_TASK_UPDATE after a ranking pass
- CONTAINER_LEAVE when a shelf leaves a workstation

Failures are not retried here; they surface to the caller.
"""
import httpx
import logging
from typing import Any, Dict, Optional

from container_priority.config import settings
from container_priority.schemas.container_task import CallbackApiType, CallbackMessage
from container_priority.services.stores import CallbackChannel

logger = logging.getLogger(__name__)


class RcsCallbackError(Exception):
    """RCS callback endpoint rejected or could not take a message."""

    def __init__(self, status_code: int, message: str, api_type: Optional[str] = None):
        self.status_code = status_code
        self.message = message
        self.api_type = api_type
        super().__init__(f"RCS callback error ({status_code}) for {api_type}: {message}")


class RcsCallbackClient(CallbackChannel):
    """
    HTTP callback channel towards the RCS.

    Usage:
        client = RcsCallbackClient()
        await client.callback(CallbackApiType.CONTAINER_TASK_UPDATE, "PICKING", [task])
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        token: Optional[str] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.base_url = (base_url or settings.RCS_CALLBACK_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.RCS_CALLBACK_TIMEOUT
        self.token = token if token is not None else settings.RCS_CALLBACK_TOKEN
        self._client = client

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    async def _post(self, client: httpx.AsyncClient, url: str, payload: Dict) -> httpx.Response:
        return await client.post(url, headers=self._headers(), json=payload, timeout=self.timeout)

    async def callback(self, api_type: CallbackApiType, biz_type: Optional[str], data: Any) -> None:
        url = f"{self.base_url}/{api_type.value}"
        payload = CallbackMessage(biz_type=biz_type, data=data).model_dump(mode="json")

        try:
            if self._client is not None:
                response = await self._post(self._client, url, payload)
            else:
                async with httpx.AsyncClient() as client:
                    response = await self._post(client, url, payload)
        except httpx.HTTPError as e:
            logger.error(f"RCS callback {api_type.value} unreachable: {e}")
            raise RcsCallbackError(status_code=503, message=str(e), api_type=api_type.value) from e

        if response.status_code >= 400:
            logger.error(f"RCS callback error: {response.status_code} - {response.text}")
            raise RcsCallbackError(
                status_code=response.status_code,
                message=response.text,
                api_type=api_type.value,
            )

        logger.debug(f"RCS callback {api_type.value} ({biz_type}) accepted")
