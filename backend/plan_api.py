"""HTTP client for the workout plan API.

Every request carries a bearer token obtained from ``token_provider`` (the
auth provider is external; by default the token comes from the settings
file or ``COACHLIX_AUTH_TOKEN``).  Failed responses are turned into
:class:`~backend.errors.ApiError` using the ``message`` field of the JSON
error body when the server sends one.
"""

from __future__ import annotations

import requests

from backend import settings
from backend.errors import ApiError, AuthenticationError
from backend.refs import Ref, path_segment


class PlanApiClient:
    def __init__(
        self,
        base_url: str | None = None,
        token_provider=None,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url or settings.api_base_url()).rstrip("/")
        self._token_provider = token_provider or settings.auth_token
        self._http = session if session is not None else requests.Session()
        self.timeout = timeout if timeout is not None else settings.request_timeout()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _headers(self) -> dict:
        token = self._token_provider()
        if not token:
            raise AuthenticationError()
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {token}",
        }

    def _request(self, method: str, path: str, payload: dict | None = None):
        url = f"{self.base_url}/{path}"
        headers = self._headers()
        try:
            response = self._http.request(
                method, url, headers=headers, json=payload, timeout=self.timeout
            )
        except requests.RequestException as exc:
            raise ApiError(f"Request to {url} failed: {exc}") from exc
        return self._handle_response(response)

    @staticmethod
    def _handle_response(response: requests.Response):
        if not response.ok:
            try:
                body = response.json()
            except ValueError:
                body = {}
            message = body.get("message") if isinstance(body, dict) else None
            raise ApiError(
                message or f"HTTP {response.status_code}",
                status=response.status_code,
            )
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as exc:
            raise ApiError(
                "Response was not valid JSON", status=response.status_code
            ) from exc

    @staticmethod
    def _workout_path(
        plan_id: str, week_number: int, day_number: int, workout_ref: Ref
    ) -> str:
        return (
            f"{plan_id}/weeks/{week_number}/days/{day_number}"
            f"/workouts/{path_segment(workout_ref)}"
        )

    # ------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------

    def get_plan(self, plan_id: str) -> dict:
        """``GET /{plan_id}``: the full plan document."""
        return self._request("GET", str(plan_id))

    def update_exercise(
        self,
        plan_id: str,
        week_number: int,
        day_number: int,
        workout_ref: Ref,
        exercise_ref: Ref,
        payload: dict,
    ) -> dict:
        """``PUT .../exercises/{exercise_ref}``: store one exercise's progress."""
        path = self._workout_path(plan_id, week_number, day_number, workout_ref)
        return self._request(
            "PUT", f"{path}/exercises/{path_segment(exercise_ref)}", payload
        )

    def add_exercise(
        self,
        plan_id: str,
        week_number: int,
        day_number: int,
        workout_ref: Ref,
        exercise: dict,
    ) -> dict:
        """``POST .../exercises``: append ``exercise`` to the workout."""
        path = self._workout_path(plan_id, week_number, day_number, workout_ref)
        return self._request("POST", f"{path}/exercises", exercise)

    def start_workout(
        self, plan_id: str, week_number: int, day_number: int, workout_ref: Ref
    ) -> dict:
        """``POST .../start``: tell the server a session has begun."""
        path = self._workout_path(plan_id, week_number, day_number, workout_ref)
        return self._request("POST", f"{path}/start")

    def complete_workout(
        self,
        plan_id: str,
        week_number: int,
        day_number: int,
        workout_ref: Ref,
        summary: dict,
    ) -> dict:
        """``POST .../complete``: submit the session summary."""
        path = self._workout_path(plan_id, week_number, day_number, workout_ref)
        return self._request("POST", f"{path}/complete", summary)
