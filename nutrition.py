import logging
from dataclasses import dataclass, field
from typing import List, Optional

import requests

from errors import LookupNotFound, TransportError
from settings_schema import SettingsSchema

logger = logging.getLogger(__name__)


@dataclass
class NutritionInfo:
    product_name: str
    brand_name: Optional[str] = None
    serving_qty: float = 1.0
    serving_unit: str = "serving"
    serving_grams: Optional[float] = None
    calories: float = 0.0
    nutrients: dict = field(default_factory=dict)

    @property
    def calories_per_100g(self) -> Optional[float]:
        if not self.serving_grams:
            return None
        return round(self.calories / self.serving_grams * 100, 1)


@dataclass(frozen=True)
class FoodOption:
    food_name: str
    brand_name: Optional[str] = None
    item_id: Optional[str] = None
    calories: Optional[float] = None


_NUTRIENT_FIELDS = {
    "total_fat": "nf_total_fat",
    "saturated_fat": "nf_saturated_fat",
    "cholesterol": "nf_cholesterol",
    "sodium": "nf_sodium",
    "total_carbs": "nf_total_carbohydrate",
    "dietary_fiber": "nf_dietary_fiber",
    "sugars": "nf_sugars",
    "protein": "nf_protein",
}


def parse_food(food: dict) -> NutritionInfo:
    """Build a :class:`NutritionInfo` from one provider food record."""
    return NutritionInfo(
        product_name=food.get("food_name", ""),
        brand_name=food.get("brand_name"),
        serving_qty=float(food.get("serving_qty") or 1.0),
        serving_unit=food.get("serving_unit") or "serving",
        serving_grams=food.get("serving_weight_grams"),
        calories=float(food.get("nf_calories") or 0.0),
        nutrients={
            name: food.get(key)
            for name, key in _NUTRIENT_FIELDS.items()
            if food.get(key) is not None
        },
    )


def calculate_calories(info: NutritionInfo, servings: float) -> dict:
    """Scale ``info`` to ``servings`` servings."""
    if servings < 0:
        raise ValueError("servings must be non-negative")
    requested_grams = (
        round(info.serving_grams * servings, 1) if info.serving_grams else None
    )
    return {
        "total_calories": round(info.calories * servings, 1),
        "serving_info": {
            "original": {
                "quantity": info.serving_qty,
                "unit": info.serving_unit,
                "grams": info.serving_grams,
            },
            "requested": {
                "quantity": round(info.serving_qty * servings, 2),
                "unit": info.serving_unit,
                "grams": requested_grams,
            },
        },
    }


class NutritionClient:
    """Client for a Nutritionix compatible food database."""

    def __init__(
        self,
        base_url: str = "https://trackapi.nutritionix.com",
        app_id: str | None = None,
        app_key: str | None = None,
        remote_user_id: str = "0",
        timeout: float = 10.0,
        timezone: str = "US/Eastern",
        locale: str = "en_US",
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.headers = {
            "x-app-id": app_id or "",
            "x-app-key": app_key or "",
            "x-remote-user-id": remote_user_id,
        }
        self.timeout = timeout
        self.timezone = timezone
        self.locale = locale

    @classmethod
    def from_settings(cls, settings: SettingsSchema) -> "NutritionClient":
        return cls(
            settings.nutritionix_url,
            settings.nutritionix_app_id,
            settings.nutritionix_app_key,
            settings.nutritionix_remote_user_id,
            settings.request_timeout,
            settings.timezone,
            settings.locale,
        )

    def _send(self, method: str, path: str, **kwargs) -> dict:
        try:
            resp = requests.request(
                method,
                f"{self.base_url}{path}",
                headers=self.headers,
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as e:
            logger.warning("Nutrition lookup failed: %s", e)
            raise TransportError(f"Could not reach the food database: {e}") from e
        if resp.status_code == 404:
            raise LookupNotFound("Product not found")
        if not resp.ok:
            raise TransportError(
                f"HTTP error! status: {resp.status_code}", status_code=resp.status_code
            )
        try:
            return resp.json()
        except ValueError as e:
            raise TransportError("Malformed response from the food database") from e

    def lookup_by_barcode(self, upc: str) -> NutritionInfo:
        upc = upc.strip()
        if not upc:
            raise LookupNotFound("Product not found")
        data = self._send("GET", "/v2/search/item", params={"upc": upc})
        foods = data.get("foods") or []
        if not foods:
            raise LookupNotFound("Product not found")
        return parse_food(foods[0])

    def search_by_text(self, query: str, limit: int = 10) -> List[FoodOption]:
        if not query.strip():
            return []
        data = self._send(
            "GET",
            "/v2/search/instant",
            params={
                "query": query,
                "branded": "true",
                "common": "false",
                "detailed": "true",
            },
        )
        options = [
            FoodOption(
                food_name=food.get("food_name", ""),
                brand_name=food.get("brand_name"),
                item_id=food.get("nix_item_id"),
                calories=food.get("nf_calories"),
            )
            for food in data.get("branded") or []
        ]
        return options[:limit]

    def natural_nutrients(self, query: str) -> List[NutritionInfo]:
        """Parse a free text meal description into foods."""
        data = self._send(
            "POST",
            "/v2/natural/nutrients",
            json={"query": query, "timezone": self.timezone, "locale": self.locale},
        )
        foods = data.get("foods") or []
        if not foods:
            raise LookupNotFound(f"No foods recognized in '{query}'")
        return [parse_food(f) for f in foods]

    def lookup_item(self, item_id: str) -> NutritionInfo:
        data = self._send("GET", "/v2/search/item", params={"nix_item_id": item_id})
        foods = data.get("foods") or []
        if not foods:
            raise LookupNotFound("Product not found")
        return parse_food(foods[0])
