"""
HTTP client for the Banana Clicker API.

One method per endpoint. Failures come out as exceptions:
RejectedError when the API answered with an error `detail`,
TransportError for everything else that went wrong on the way.
"""

import logging
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .config import ClientConfig
from .errors import RejectedError, TransportError
from .models import (
    InitRequest,
    InitResponse,
    SyncRequest,
    SyncResponse,
    UpgradeRequest,
    UpgradeResponse,
    SessionRequest,
    PrestigeResponse,
    SkinRequest,
    SkinResponse,
    EventClickRequest,
    EventClickResponse,
    ScoreRequest,
    ScoreResponse,
    ResetResponse,
    Skin,
)

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class AuthorityClient:
    def __init__(self, base_url: str, timeout: float = 10.0,
                 http: Optional[httpx.AsyncClient] = None):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._owns_http = http is None
        self._closed = False
        self.http = http or httpx.AsyncClient(timeout=httpx.Timeout(timeout))

    @classmethod
    def from_config(cls, config: ClientConfig,
                    http: Optional[httpx.AsyncClient] = None) -> "AuthorityClient":
        return cls(config.api_base_url, config.request_timeout_seconds, http=http)

    @property
    def closed(self) -> bool:
        return self._closed or self.http.is_closed

    async def close(self) -> None:
        self._closed = True
        if self._owns_http:
            await self.http.aclose()

    async def __aenter__(self) -> "AuthorityClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # Endpoints

    async def init(self, session_id: Optional[str] = None) -> InitResponse:
        return await self._post("/init", InitRequest(sessionId=session_id), InitResponse)

    async def sync(self, request: SyncRequest) -> SyncResponse:
        return await self._post("/sync", request, SyncResponse)

    async def upgrade(self, session_id: str, upgrade_id: str) -> UpgradeResponse:
        body = UpgradeRequest(sessionId=session_id, upgradeId=upgrade_id)
        return await self._post("/upgrade", body, UpgradeResponse)

    async def prestige(self, session_id: str) -> PrestigeResponse:
        return await self._post("/prestige", SessionRequest(sessionId=session_id), PrestigeResponse)

    async def buy_skin(self, session_id: str, skin_id: str) -> SkinResponse:
        body = SkinRequest(sessionId=session_id, skinId=skin_id)
        return await self._post("/buy-skin", body, SkinResponse)

    async def click_event(self, session_id: str, event_id: str) -> EventClickResponse:
        body = EventClickRequest(sessionId=session_id, eventId=event_id)
        return await self._post("/click-event", body, EventClickResponse)

    async def submit_score(self, session_id: str, name: str) -> ScoreResponse:
        body = ScoreRequest(sessionId=session_id, name=name)
        return await self._post("/submit-score", body, ScoreResponse)

    async def reset(self, session_id: str) -> ResetResponse:
        return await self._post("/reset", SessionRequest(sessionId=session_id), ResetResponse)

    async def skins(self) -> Dict[str, Skin]:
        data = await self._request("GET", "/skins")
        if not isinstance(data, dict):
            raise TransportError("Unexpected skins payload")
        try:
            return {skin_id: Skin.model_validate(skin) for skin_id, skin in data.items()}
        except ValidationError as e:
            raise TransportError(f"Invalid skins payload: {e}") from e

    # Plumbing

    async def _post(self, path: str, body: BaseModel, response_model: Type[ResponseT]) -> ResponseT:
        data = await self._request("POST", path, json=body.model_dump(mode="json"))
        try:
            return response_model.model_validate(data)
        except ValidationError as e:
            raise TransportError(f"Invalid response from {path}: {e}") from e

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Any:
        url = f"{self.base_url}{path}"
        if self.closed:
            raise TransportError(f"{method} {path} failed: client is closed")
        try:
            r = await self.http.request(method, url, json=json, timeout=self.timeout)
        except httpx.TimeoutException as e:
            raise TransportError(f"{method} {path} timed out") from e
        except httpx.HTTPError as e:
            raise TransportError(f"{method} {path} failed: {e}") from e

        if r.is_error:
            detail = _error_detail(r)
            if detail is not None and r.status_code < 500:
                raise RejectedError(detail, r.status_code)
            raise TransportError(f"{method} {path} returned {r.status_code}")

        try:
            return r.json()
        except ValueError as e:
            raise TransportError(f"{method} {path} returned invalid JSON") from e


def _error_detail(response: httpx.Response) -> Optional[str]:
    """FastAPI puts HTTPException messages under `detail`"""
    try:
        payload = response.json()
    except ValueError:
        return None
    if isinstance(payload, dict) and isinstance(payload.get("detail"), str):
        return payload["detail"]
    return None
