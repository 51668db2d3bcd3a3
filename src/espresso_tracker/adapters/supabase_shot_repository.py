"""Supabase repository for recorded shots."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from espresso_tracker.domain.shots import Shot, TasteDescriptor, to_local_naive
from espresso_tracker.services.recommendations import ShotRepository

_SHOT_COLUMNS = (
    "id, bean_id, coffee_weight_in, coffee_weight_out, extraction_time_seconds, "
    "grinder_setting, notes, timestamp, taste_primary, taste_secondary"
)


@dataclass
class SupabaseShotRepository(ShotRepository):
    """Supabase implementation for shot queries."""

    client: Client

    def get_last_shot_for_bean(self, bean_id: str) -> Shot | None:
        """Return the most recent shot for a bean."""
        response = (
            self.client.table("shots")
            .select(_SHOT_COLUMNS)
            .eq("bean_id", bean_id)
            .order("timestamp", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def list_shots_for_bean(self, bean_id: str) -> list[Shot]:
        """Return every shot for a bean, oldest first."""
        response = (
            self.client.table("shots")
            .select(_SHOT_COLUMNS)
            .eq("bean_id", bean_id)
            .order("timestamp", desc=False)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]


def _parse_taste(value: object) -> TasteDescriptor | None:
    if not isinstance(value, str) or not value:
        return None
    try:
        return TasteDescriptor(value.upper())
    except ValueError:
        return None


def _parse_row(row: dict[str, object]) -> Shot:
    timestamp_raw = row.get("timestamp")
    timestamp = (
        to_local_naive(datetime.fromisoformat(timestamp_raw))
        if isinstance(timestamp_raw, str) and timestamp_raw
        else datetime.min
    )
    return Shot(
        id=str(row["id"]),
        bean_id=str(row["bean_id"]),
        coffee_weight_in=float(row.get("coffee_weight_in") or 0.0),
        coffee_weight_out=float(row.get("coffee_weight_out") or 0.0),
        extraction_time_seconds=int(row.get("extraction_time_seconds") or 0),
        grinder_setting=str(row.get("grinder_setting") or ""),
        notes=str(row.get("notes") or ""),
        timestamp=timestamp,
        taste_primary=_parse_taste(row.get("taste_primary")),
        taste_secondary=_parse_taste(row.get("taste_secondary")),
    )
