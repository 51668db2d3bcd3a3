"""Supabase repositories for grinder configuration and bean settings."""

from dataclasses import dataclass
from datetime import datetime

from supabase import Client

from espresso_tracker.domain.shots import GrinderConfiguration
from espresso_tracker.services.recommendations import (
    BeanRepository,
    GrinderConfigRepository,
)


@dataclass
class SupabaseGrinderConfigRepository(GrinderConfigRepository):
    """Supabase implementation for the grinder scale configuration."""

    client: Client

    def get_current_config(self) -> GrinderConfiguration | None:
        """Return the most recently saved grinder configuration."""
        response = (
            self.client.table("grinder_configuration")
            .select("id, scale_min, scale_max, step_size, created_at")
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        row = response.data[0]
        created_raw = row.get("created_at")
        return GrinderConfiguration(
            id=str(row["id"]) if row.get("id") else None,
            scale_min=int(row["scale_min"]),
            scale_max=int(row["scale_max"]),
            step_size=float(
                row.get("step_size") or GrinderConfiguration.DEFAULT_STEP_SIZE
            ),
            created_at=(
                datetime.fromisoformat(created_raw)
                if isinstance(created_raw, str) and created_raw
                else None
            ),
        )


@dataclass
class SupabaseBeanRepository(BeanRepository):
    """Supabase implementation for bean settings."""

    client: Client

    def get_recommended_dose(self, bean_id: str) -> float | None:
        """Return the dose configured for a bean."""
        response = (
            self.client.table("beans")
            .select("recommended_dose")
            .eq("id", bean_id)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        dose = response.data[0].get("recommended_dose")
        return float(dose) if dose is not None else None
