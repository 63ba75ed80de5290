"""
Client for the hosted table API that stores cloud-kitchen slots.
"""

import logging
from typing import Any, Dict, List

import requests

from ..domain.exceptions import SlotStoreError
from ..domain.models import MenuItem, SlotDefinition

logger = logging.getLogger(__name__)


class SlotStoreClient:
    """
    Client for the PostgREST-style REST interface of the backend.

    Uses ``/rest/v1/<table>`` with query-string filters, e.g.
    ``is_active=eq.true&order=display_order.asc``.
    """

    REST_PATH = "/rest/v1"

    def __init__(
        self,
        base_url: str,
        api_key: str,
        slots_table: str = "cloud_kitchen_slots",
        items_table: str = "food_items",
        timeout: float = 10.0,
        session: requests.Session | None = None
    ):
        """
        Initialize the store client.

        Args:
            base_url: Project URL of the backend
            api_key: API key sent as ``apikey`` and bearer token
            slots_table: Name of the slots table
            items_table: Name of the menu items table
            timeout: Request timeout in seconds
            session: Optional requests session (shared connection pool)
        """
        self.base_url = base_url.rstrip("/")
        self.slots_table = slots_table
        self.items_table = items_table
        self.timeout = timeout
        self.session = session or requests.Session()
        self.headers = {
            "apikey": api_key,
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json"
        }

    @classmethod
    def from_config(cls, store_config) -> "SlotStoreClient":
        """Build a client from a StoreConfig."""
        return cls(
            base_url=store_config.url,
            api_key=store_config.api_key,
            slots_table=store_config.slots_table,
            items_table=store_config.items_table,
            timeout=store_config.timeout_seconds
        )

    def get_active_slots(self) -> List[SlotDefinition]:
        """
        Get all active slots in display order.

        Returns:
            List of SlotDefinition objects

        Raises:
            SlotStoreError: If the API call fails
            SlotDataError: If a row cannot be parsed
        """
        rows = self._get(
            self.slots_table,
            {
                "select": "*",
                "is_active": "eq.true",
                "order": "display_order.asc"
            }
        )
        logger.debug("Fetched %d active slots", len(rows))

        return [SlotDefinition.from_record(row) for row in rows]

    def get_slot_items(self, slot_id: str) -> List[MenuItem]:
        """
        Get the available menu items of a slot, ordered by name.

        Args:
            slot_id: Slot identifier

        Returns:
            List of MenuItem objects
        """
        rows = self._get(
            self.items_table,
            {
                "select": "id,name,description,price,is_vegetarian,set_size,"
                          "min_order_sets,cloud_kitchen_slot_id",
                "cloud_kitchen_slot_id": f"eq.{slot_id}",
                "is_available": "eq.true",
                "order": "name.asc"
            }
        )

        return [MenuItem.from_record(row) for row in rows]

    def _get(self, table: str, params: Dict[str, str]) -> List[Dict[str, Any]]:
        url = f"{self.base_url}{self.REST_PATH}/{table}"

        try:
            response = self.session.get(
                url,
                headers=self.headers,
                params=params,
                timeout=self.timeout
            )
            response.raise_for_status()
            data = response.json()

        except requests.exceptions.RequestException as e:
            raise SlotStoreError(f"Failed to fetch {table} from slot store: {e}") from e
        except ValueError as e:
            raise SlotStoreError(f"Slot store returned invalid JSON for {table}: {e}") from e

        if not isinstance(data, list):
            raise SlotStoreError(
                f"Unexpected response for {table}: expected a list of rows, got {type(data).__name__}"
            )

        return data
