"""Tests for the recurring-series preview endpoint."""

from datetime import UTC, datetime

from httpx import AsyncClient

from coachcal.models.coach import Coach


async def _preview(client: AsyncClient, coach_id: int, **overrides):
    body = {
        "start_date": "2024-03-04",
        "end_date": "2024-03-25",
        "time": "5:00 PM",
        "pattern": "weekly",
        "time_zone": "America/New_York",
    }
    body.update(overrides)
    return await client.post(f"/api/coaches/{coach_id}/recurrence/preview", json=body)


class TestRecurrencePreview:
    async def test_mondays_in_march(self, client: AsyncClient, coach: Coach) -> None:
        response = await _preview(client, coach.id)
        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 4
        assert data["remaining"] == 0
        assert [datetime.fromisoformat(d).astimezone(UTC).day for d in data["dates"]] == [
            4,
            11,
            18,
            25,
        ]

    async def test_capped_at_ten(self, client: AsyncClient, coach: Coach) -> None:
        response = await _preview(client, coach.id, end_date="2024-06-30")
        data = response.json()
        assert len(data["dates"]) == 10
        assert data["total"] == 17
        assert data["remaining"] == 7

    async def test_working_days_filter(self, client: AsyncClient, coach: Coach) -> None:
        await client.put(
            f"/api/coaches/{coach.id}/working-hours",
            json={"start_time": "9:00 AM", "end_time": "5:00 PM", "working_days": ["Tuesday"]},
        )
        response = await _preview(client, coach.id)
        assert response.json()["total"] == 0

        response = await _preview(client, coach.id, override_working_days=True)
        assert response.json()["total"] == 4

    async def test_missing_end_date(self, client: AsyncClient, coach: Coach) -> None:
        response = await _preview(client, coach.id, end_date=None)
        assert response.status_code == 422

    async def test_too_long(self, client: AsyncClient, coach: Coach) -> None:
        response = await _preview(client, coach.id, end_date="2031-01-01")
        assert response.status_code == 422

    async def test_invalid_time(self, client: AsyncClient, coach: Coach) -> None:
        response = await _preview(client, coach.id, time="17:00")
        assert response.status_code == 422
