"""
OpenWeatherMap current weather endpoint.

API Documentation: https://openweathermap.org/current
"""

from typing import Any

from aggregator.endpoints.base import BaseEndpoint, VendorModel
from aggregator.models import FilterOptions, SortingOptions


class WeatherCondition(VendorModel):
    main: str | None = None
    description: str = ""


class MainReadings(VendorModel):
    temp: float
    humidity: float | None = None


class WeatherResponse(VendorModel):
    weather: list[WeatherCondition] | None = None
    main: MainReadings | None = None


class WeatherEndpoint(BaseEndpoint):
    """
    Current weather for a single configured city.

    Filters and sorting do not apply, so every call shares one cache key.
    """

    ENDPOINT_NAME = "WeatherEndpoint"
    URL = "https://api.openweathermap.org/data/2.5/weather"
    CACHE_KEY = "WeatherCacheKey"
    NOT_FOUND_MESSAGE = "Weather data not found!"
    TEMPLATE = "Weather in {city}: {description}, Temperature: {temp:.2f} °C"

    def __init__(self, *args, city: str = "Athens", **kwargs):
        super().__init__(*args, **kwargs)
        self.city = city

    def cache_key(
        self, filter_options: FilterOptions, sorting_options: SortingOptions
    ) -> str:
        return self.CACHE_KEY

    def params(self) -> dict[str, Any]:
        return {"q": self.city, "units": "metric", "appid": self.api_key}

    def render(
        self,
        payload: Any,
        filter_options: FilterOptions,
        sorting_options: SortingOptions,
    ) -> str:
        data = WeatherResponse.model_validate(payload)
        if not data.weather or data.main is None:
            return self.NOT_FOUND_MESSAGE

        return self.TEMPLATE.format(
            city=self.city,
            description=data.weather[0].description,
            temp=data.main.temp,
        )
