# interfaces/reference_data.py
"""
Reference Data Store
Loads, once at startup, the tables the booking engine prices from:
- hotel_zones (active)
- vehicle_types (active)
- pricing_rules (active)
- global_discount_settings (latest active percentage)
- experience_gallery (active, display order)

Source is the hosted database's REST endpoint (Supabase PostgREST), or a
local JSON seed file when REFERENCE_DATA_FILE is set. A table that cannot
be loaded stays empty; routes then fall back to estimated pricing.
"""

import asyncio
import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Type, TypeVar
import httpx
from loguru import logger
from pydantic import BaseModel, ValidationError

from ..config import settings
from ..exceptions import ReferenceDataError
from ..schemas.ai_schemas import (
    GalleryItem,
    HotelZone,
    PricingRule,
    ReferenceData,
    VehicleType,
)

ModelT = TypeVar("ModelT", bound=BaseModel)


# PostgREST query params per table
TABLE_QUERIES: Dict[str, Dict[str, str]] = {
    "hotel_zones": {"select": "*", "is_active": "eq.true"},
    "vehicle_types": {
        "select": "id,name,passenger_capacity,luggage_capacity",
        "is_active": "eq.true",
    },
    "pricing_rules": {
        "select": "id,origin,destination,vehicle_type_id,base_price,zone",
        "is_active": "eq.true",
    },
    "global_discount_settings": {
        "select": "discount_percentage",
        "is_active": "eq.true",
        "order": "created_at.desc",
        "limit": "1",
    },
    "experience_gallery": {
        "select": "*",
        "is_active": "eq.true",
        "order": "display_order.asc",
    },
}


def _parse_rows(model: Type[ModelT], rows: List[Dict[str, Any]], table: str) -> List[ModelT]:
    """Validate rows, skipping the ones that do not fit the model"""
    parsed = []
    for row in rows:
        try:
            parsed.append(model.model_validate(row))
        except ValidationError as e:
            logger.warning(f"Skipping invalid {table} row {row.get('id')}: {e.error_count()} errors")
    return parsed


def _clean_hotel_row(row: Dict[str, Any]) -> Dict[str, Any]:
    row = dict(row)
    row["search_terms"] = row.get("search_terms") or []
    row["zone_code"] = row.get("zone_code") or ""
    return row


def _gallery_row(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "url": row.get("media_url") or row.get("url") or "",
        "title": row.get("title") or "",
        "description": row.get("description") or "",
    }


class ReferenceDataStore:
    """
    One-shot loader for the pricing reference tables
    """

    def __init__(
        self,
        supabase_url: Optional[str] = None,
        api_key: Optional[str] = None,
        seed_file: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.supabase_url = (settings.SUPABASE_URL if supabase_url is None else supabase_url).rstrip("/")
        self.api_key = settings.SUPABASE_ANON_KEY if api_key is None else api_key
        self.seed_file = settings.REFERENCE_DATA_FILE if seed_file is None else seed_file
        self.timeout = timeout or settings.REFERENCE_DATA_TIMEOUT
        self._http_client = http_client
        self.data = ReferenceData()
        self.loaded = False

    def _headers(self) -> Dict[str, str]:
        return {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }

    async def load(self) -> ReferenceData:
        """
        Load every table. Never raises; failures are logged and leave the
        affected table empty.
        """
        if self.seed_file:
            try:
                self.data = self.load_seed_file(self.seed_file)
            except ReferenceDataError as e:
                logger.error(f"Reference data seed failed: {e}")
                self.data = ReferenceData()
        elif self.supabase_url:
            self.data = await self._load_remote()
        else:
            logger.warning("No reference data source configured, all routes will use estimated pricing")
            self.data = ReferenceData()

        self.loaded = True
        logger.info(
            f"Reference data: {len(self.data.hotel_zones)} hotels, "
            f"{len(self.data.vehicle_types)} vehicles, {len(self.data.pricing_rules)} pricing rules, "
            f"discount {self.data.global_discount_percentage}%"
        )
        return self.data

    def load_seed_file(self, path: str) -> ReferenceData:
        """Read a JSON file shaped like ReferenceData"""
        try:
            raw = json.loads(Path(path).read_text(encoding="utf-8"))
            return ReferenceData.model_validate(raw)
        except (OSError, ValueError) as e:
            raise ReferenceDataError(f"Cannot read {path}: {e}") from e

    async def _load_remote(self) -> ReferenceData:
        if self._http_client:
            return await self._fetch_all(self._http_client)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._fetch_all(client)

    async def _fetch_all(self, client: httpx.AsyncClient) -> ReferenceData:
        tables = list(TABLE_QUERIES)
        results = await asyncio.gather(
            *(self._fetch_table(client, table) for table in tables),
            return_exceptions=True,
        )

        rows: Dict[str, List[Dict[str, Any]]] = {}
        for table, result in zip(tables, results):
            if isinstance(result, Exception):
                logger.error(f"Failed to load {table}: {result}")
                rows[table] = []
            elif isinstance(result, BaseException):
                raise result
            else:
                rows[table] = result

        discount = 0.0
        if rows["global_discount_settings"]:
            try:
                discount = float(rows["global_discount_settings"][0].get("discount_percentage") or 0)
            except (TypeError, ValueError):
                logger.warning("Ignoring malformed global discount percentage")

        return ReferenceData(
            hotel_zones=_parse_rows(HotelZone, [_clean_hotel_row(r) for r in rows["hotel_zones"]], "hotel_zones"),
            vehicle_types=_parse_rows(VehicleType, rows["vehicle_types"], "vehicle_types"),
            pricing_rules=_parse_rows(PricingRule, rows["pricing_rules"], "pricing_rules"),
            global_discount_percentage=discount,
            gallery=_parse_rows(GalleryItem, [_gallery_row(r) for r in rows["experience_gallery"]], "experience_gallery"),
        )

    async def _fetch_table(self, client: httpx.AsyncClient, table: str) -> List[Dict[str, Any]]:
        url = f"{self.supabase_url}/rest/v1/{table}"
        try:
            response = await client.get(url, params=TABLE_QUERIES[table], headers=self._headers())
        except httpx.HTTPError as e:
            raise ReferenceDataError(f"{table} request failed: {e}") from e

        if response.status_code != 200:
            raise ReferenceDataError(f"{table} returned {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise ReferenceDataError(f"{table} returned invalid JSON") from e

        if not isinstance(data, list):
            raise ReferenceDataError(f"{table} returned {type(data).__name__}, expected a list")
        return data


# Global instance
reference_data_store = ReferenceDataStore()
