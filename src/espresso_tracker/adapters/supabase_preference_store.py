"""Supabase-backed key-value preference store."""

from dataclasses import dataclass
from datetime import UTC, datetime

from supabase import Client

from espresso_tracker.services.key_value import KeyValueStore


@dataclass
class SupabasePreferenceStore(KeyValueStore):
    """Key-value store kept in a two-column Supabase table."""

    client: Client
    table_name: str = "preferences"

    def get(self, key: str) -> str | None:
        """Return the stored value for a key."""
        response = (
            self.client.table(self.table_name)
            .select("value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        value = response.data[0].get("value")
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        """Insert or replace the value for a key."""
        response = (
            self.client.table(self.table_name)
            .upsert(
                {
                    "key": key,
                    "value": value,
                    "updated_at": datetime.now(tz=UTC).isoformat(),
                },
                on_conflict="key",
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to store preference")

    def delete(self, key: str) -> None:
        """Delete a key."""
        self.client.table(self.table_name).delete().eq("key", key).execute()

    def keys(self) -> list[str]:
        """Return every stored key."""
        response = self.client.table(self.table_name).select("key").execute()
        return [str(row["key"]) for row in response.data or [] if row.get("key")]
