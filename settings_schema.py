from typing import Literal, Optional

from pydantic import BaseModel, ValidationError


class SettingsSchema(BaseModel):
    api_url: str = "http://localhost:8000"
    request_timeout: float = 10.0
    weight_unit: Literal["kg", "lb"] = "lb"
    time_format: Literal["12h", "24h"] = "24h"
    metric: Literal["weight", "est_1rm", "volume"] = "weight"
    language: str = "en"
    log_level: str = "INFO"
    nutritionix_url: str = "https://trackapi.nutritionix.com"
    nutritionix_app_id: Optional[str] = None
    nutritionix_app_key: Optional[str] = None
    nutritionix_remote_user_id: str = "0"
    timezone: str = "US/Eastern"
    locale: str = "en_US"


def validate_settings(data: dict) -> SettingsSchema:
    try:
        return SettingsSchema(**data)
    except ValidationError as e:
        raise ValueError(str(e))
