"""Async HTTP client for the FormDesk API."""

from typing import Any, Dict, List, Optional

import httpx
import structlog

logger = structlog.get_logger(__name__)


class ApiError(Exception):
    """Non-2xx response from the API."""

    def __init__(self, status_code: int, detail: Any):
        super().__init__(f"{status_code}: {detail}")
        self.status_code = status_code
        self.detail = detail


class FormDeskClient:
    """Thin wrapper over ``httpx.AsyncClient`` holding the bearer token."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        timeout: float = 10.0,
    ):
        self.token = token
        self._client = httpx.AsyncClient(base_url=base_url, transport=transport, timeout=timeout)

    async def __aenter__(self) -> "FormDeskClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        headers = kwargs.pop("headers", {})
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        response = await self._client.request(method, path, headers=headers, **kwargs)
        if response.status_code >= 400:
            try:
                body = response.json()
            except ValueError:
                body = response.text
            detail = body.get("detail") if isinstance(body, dict) else body
            logger.info("api_error", method=method, path=path, status_code=response.status_code)
            raise ApiError(response.status_code, detail)
        if not response.content:
            return None
        return response.json()

    # Auth
    async def register(self, email: str, password: str, invite_code: Optional[str] = None) -> Dict[str, Any]:
        body = {"email": email, "password": password, "invite_code": invite_code}
        result = await self._request("POST", "/api/auth/register", json=body)
        self.token = result["access_token"]
        return result

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        result = await self._request(
            "POST", "/api/auth/login/json", json={"email": email, "password": password}
        )
        self.token = result["access_token"]
        return result

    async def logout(self) -> None:
        await self._request("POST", "/api/auth/logout")
        self.token = None

    async def me(self) -> Dict[str, Any]:
        return await self._request("GET", "/api/auth/me")

    async def update_profile(self, **changes) -> Dict[str, Any]:
        return await self._request("PUT", "/api/profile", json=changes)

    # Templates
    async def list_templates(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/templates")

    async def get_template(self, template_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/api/templates/{template_id}")

    async def predefined_templates(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/templates/predefined")

    async def create_template(self, body: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/api/templates", json=body)

    async def update_template(self, template_id: int, body: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("PUT", f"/api/templates/{template_id}", json=body)

    async def delete_template(self, template_id: int) -> Dict[str, Any]:
        return await self._request("DELETE", f"/api/templates/{template_id}")

    # Submissions
    async def render_form(self, template_id: int) -> Dict[str, Any]:
        return await self._request("GET", f"/api/submissions/template/{template_id}/render")

    async def get_submission(self, template_id: int) -> Optional[Dict[str, Any]]:
        """The caller's submission for a template, or None."""
        try:
            return await self._request("GET", f"/api/submissions/template/{template_id}")
        except ApiError as e:
            if e.status_code == 404:
                return None
            raise

    async def save_progress(self, template_id: int, form_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "PUT", f"/api/submissions/template/{template_id}", json={"form_data": form_data}
        )

    async def submit(self, template_id: int, form_data: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request(
            "POST", f"/api/submissions/template/{template_id}/submit", json={"form_data": form_data}
        )

    async def my_submissions(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/api/submissions/mine")

    # Review
    async def list_submissions(self, **filters) -> List[Dict[str, Any]]:
        params = {k: v for k, v in filters.items() if v is not None}
        return await self._request("GET", "/api/submissions", params=params)

    async def add_note(self, submission_id: int, note: str) -> Dict[str, Any]:
        return await self._request(
            "POST", f"/api/submissions/{submission_id}/notes", json={"note": note}
        )

    # Invites
    async def accept_invite(self, code: str) -> Dict[str, Any]:
        return await self._request("POST", f"/api/invites/{code}/accept")
