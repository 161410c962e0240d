"""
frontend/api_client.py
Centralized client for the EstateFund platform REST API.

This module ensures:
1. Every call attaches the Authorization header when a token is set
2. Consistent error handling: non-2xx and transport failures raise ApiRequestError
3. Centralized API base URL configuration (local/staging/production)
4. The asset-upload and listing-creation collaborators used by the
   two-phase submission flow live next to the transport they use
"""

from __future__ import annotations

import json as jsonlib
from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple

import requests

# Import config (robust fallback for different run contexts)
try:
    from frontend.config import get_api_base_url, IS_DEV, REQUEST_TIMEOUT
except ModuleNotFoundError:
    from config import get_api_base_url, IS_DEV, REQUEST_TIMEOUT


__all__ = [
    "ApiClient",
    "ApiRequestError",
    "ListingCreator",
    "ProjectImageUploader",
    "error_message_from_body",
]


class ApiRequestError(Exception):
    """Raised when a platform API call fails (transport, HTTP status or body)."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def error_message_from_body(data: Any, status_code: int) -> str:
    """
    User-facing message for a failed response body.

    Priority: error.message -> message -> error (string) -> generic HTTP text.
    """
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if data.get("message"):
            return str(data["message"])
        if isinstance(error, str) and error:
            return error
    return f"HTTP {status_code}: An error occurred"


class ApiClient:
    """
    Thin wrapper over requests for the platform API.

    The response envelope ({success, data, message, error}) is returned as a
    dict; its interpretation belongs to the caller.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        auth_token: Optional[str] = None,
        timeout: int = REQUEST_TIMEOUT,
    ):
        self._base_url = base_url.rstrip("/") if base_url else None
        self._auth_token = auth_token
        self.timeout = timeout

    def set_token(self, token: Optional[str]) -> None:
        self._auth_token = token

    @property
    def base_url(self) -> str:
        if self._base_url is None:
            try:
                self._base_url = get_api_base_url()
            except RuntimeError as e:
                raise ApiRequestError(f"Configuration error: {e}")
        return self._base_url

    def _headers(self, has_json: bool) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        # Multipart bodies set their own Content-Type with the boundary
        if has_json:
            headers["Content-Type"] = "application/json"
        if self._auth_token:
            headers["Authorization"] = f"Bearer {self._auth_token}"
        return headers

    def request(
        self,
        method: Literal["GET", "POST", "PUT", "DELETE"],
        path: str,
        json: Optional[Dict[str, Any]] = None,
        files: Optional[Sequence[Tuple[str, Tuple[str, bytes, str]]]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Make an API request and return the decoded body.

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: API endpoint path (e.g., "/projects")
            json: JSON body for POST/PUT requests
            files: Multipart file tuples for uploads
            params: Query parameters

        Returns:
            Response body as a dict

        Raises:
            ApiRequestError: on timeout, connection failure, invalid JSON or non-2xx status
        """
        base_url = self.base_url
        url = f"{base_url}{path}"
        headers = self._headers(has_json=json is not None)

        if IS_DEV:
            print(f"[API] {method} {path}")

        try:
            if method == "GET":
                resp = requests.get(url, headers=headers, params=params, timeout=self.timeout)
            elif method == "POST":
                resp = requests.post(url, json=json, files=files, headers=headers, params=params, timeout=self.timeout)
            elif method == "PUT":
                resp = requests.put(url, json=json, headers=headers, params=params, timeout=self.timeout)
            elif method == "DELETE":
                resp = requests.delete(url, headers=headers, params=params, timeout=self.timeout)
            else:
                raise ValueError(f"Unsupported HTTP method: {method}")

        except requests.exceptions.Timeout:
            if IS_DEV:
                print(f"[API] Timeout on {method} {path}")
            raise ApiRequestError(f"Request timed out after {self.timeout}s. Please try again.")

        except requests.exceptions.ConnectionError:
            if IS_DEV:
                print(f"[API] Connection error on {method} {path}")
            raise ApiRequestError(f"Cannot connect to backend at {base_url}. Please check your connection.")

        except requests.exceptions.RequestException as e:
            error_msg = str(e)
            # Never surface credentials in user-facing text
            if "bearer" in error_msg.lower() or "authorization" in error_msg.lower():
                error_msg = "Authentication error (details hidden for security)"
            if IS_DEV:
                print(f"[API] Unexpected error on {method} {path}: {type(e).__name__}")
            raise ApiRequestError(f"Unexpected error: {error_msg[:100]}")

        data = self._decode(resp)

        if IS_DEV:
            print(f"[API] Response status: {resp.status_code}")

        if not resp.ok:
            message = error_message_from_body(data, resp.status_code)
            if IS_DEV:
                print(f"[API] Request failed: {message}")
            raise ApiRequestError(message, status_code=resp.status_code)

        return data

    @staticmethod
    def _decode(resp: requests.Response) -> Dict[str, Any]:
        content_type = resp.headers.get("content-type", "")
        if "application/json" not in content_type:
            return {"message": resp.text or "No content"}

        text = resp.text
        if not text:
            return {}
        try:
            data = jsonlib.loads(text)
        except ValueError:
            raise ApiRequestError("Invalid JSON response from server", status_code=resp.status_code)

        if not isinstance(data, dict):
            return {"data": data}
        return data


# ============================================================================
# Submission collaborators
# ============================================================================

class ProjectImageUploader:
    """Uploads every pending image in one multipart call; returns the envelope."""

    def __init__(self, client: ApiClient, path: str = "/projects/upload-images"):
        self.client = client
        self.path = path

    def upload(self, files: List[Any]) -> Dict[str, Any]:
        if not files:
            return {"success": True, "data": []}

        multipart = [
            ("images", (f.name, f.content, getattr(f, "content_type", "application/octet-stream")))
            for f in files
        ]
        if IS_DEV:
            total_kb = sum(len(f.content) for f in files) / 1024
            print(f"[API] Uploading {len(files)} image(s), {total_kb:.2f} KB")
        return self.client.request("POST", self.path, files=multipart)


class ListingCreator:
    """Creates a project/property listing from a wire payload."""

    def __init__(self, client: ApiClient, path: str = "/projects"):
        self.client = client
        self.path = path

    def create(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self.client.request("POST", self.path, json=payload)
