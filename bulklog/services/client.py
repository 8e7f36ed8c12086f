from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional, Sequence, Union

import httpx
from pydantic import BaseModel

from ..settings import get_settings
from .plan import PlanDay, suggest_six_day_plan

CARDIO = "cardio"
CATEGORIES = ("push", "pull", "legs", "core", CARDIO)


class ApiError(Exception):
    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class LogEntry(BaseModel):
    """One row of the tracker form before it is turned into a request body."""

    category: str = "push"
    exercise_name: str = ""
    sets: Union[int, str, None] = 3
    reps: Union[int, str, None] = None
    weight_kg: Union[float, str, None] = None
    time_minutes: Union[float, str, None] = None
    distance_km: Union[float, str, None] = None
    calories_burned: Union[float, str, None] = None


def _number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def build_workout_payload(
    workout_date: Union[date, str],
    notes: str,
    entries: Sequence[LogEntry],
) -> Dict[str, Any]:
    """Turn tracker entries into the POST /workouts body.

    Strength entries are prefixed with their category and expanded into
    ``sets`` identical sets; cardio entries map one to one.
    """
    strength: List[Dict[str, Any]] = []
    cardio: List[Dict[str, Any]] = []
    for entry in entries:
        name = entry.exercise_name.strip()
        if not name:
            continue
        if entry.category == CARDIO:
            cardio.append({
                "activityName": name,
                "timeMinutes": _number(entry.time_minutes),
                "distanceKm": _number(entry.distance_km),
                "caloriesBurned": _number(entry.calories_burned),
            })
            continue
        sets_count = max(1, int(_number(entry.sets) or 1))
        one_set = {"reps": int(_number(entry.reps)), "weightKg": _number(entry.weight_kg)}
        strength.append({
            "exerciseName": f"{entry.category.upper()} - {name}",
            "sets": [dict(one_set) for _ in range(sets_count)],
        })

    if not strength and not cardio:
        raise ValueError("Add at least one exercise entry before saving.")

    return {
        "workoutDate": workout_date.isoformat() if isinstance(workout_date, date) else workout_date,
        "notes": notes,
        "strength": strength,
        "cardio": cardio,
    }


class BulkLogClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = (base_url or get_settings().api_base_url).rstrip("/")
        self.token = token
        self._client = httpx.AsyncClient(
            base_url=self.base_url,
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            timeout=30.0,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "BulkLogClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    def _auth_headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    async def _request(self, method: str, path: str, json: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        resp = await self._client.request(method, path, json=json, headers=self._auth_headers())
        try:
            data = resp.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}
        if resp.status_code >= 400:
            raise ApiError(resp.status_code, data.get("message") or "Request failed.")
        return data

    async def health(self) -> Dict[str, Any]:
        return await self._request("GET", "/health")

    async def register(self, name: str, email: str, password: str) -> Dict[str, Any]:
        data = await self._request(
            "POST", "/auth/register",
            json={"name": name.strip(), "email": email.strip(), "password": password},
        )
        self.token = data.get("token")
        return data

    async def login(self, email: str, password: str) -> Dict[str, Any]:
        data = await self._request("POST", "/auth/login", json={"email": email.strip(), "password": password})
        self.token = data.get("token")
        return data

    async def me(self) -> Dict[str, Any]:
        return await self._request("GET", "/me")

    async def update_profile(
        self,
        body_weight_kg: float,
        height_cm: float,
        muscle_weight_kg: float,
        fat_percentage: float,
    ) -> Dict[str, Any]:
        return await self._request("PUT", "/profile", json={
            "bodyWeightKg": body_weight_kg,
            "heightCm": height_cm,
            "muscleWeightKg": muscle_weight_kg,
            "fatPercentage": fat_percentage,
        })

    async def save_workout(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await self._request("POST", "/workouts", json=payload)

    async def workouts(self) -> List[Dict[str, Any]]:
        data = await self._request("GET", "/workouts")
        return data.get("workouts", [])

    async def suggested_plan(self) -> List[PlanDay]:
        data = await self.me()
        return suggest_six_day_plan(data.get("user"))
