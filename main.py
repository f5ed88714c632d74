"""
API Aggregator entry point.
Serves aggregated weather, news and sports results over HTTP.
"""

import uvicorn
from loguru import logger

from aggregator.api import create_app
from aggregator.settings import global_settings


def main() -> None:
    """Main function"""
    logger.info("Starting API Aggregator...")

    configured = [
        name
        for name, key in (
            ("weather", global_settings.weather_api_key),
            ("news", global_settings.news_api_key),
            ("sports", global_settings.sports_api_key),
        )
        if key
    ]
    if len(configured) < 3:
        logger.warning(f"Only {configured or 'no'} endpoints have API keys configured")

    try:
        uvicorn.run(
            create_app(global_settings),
            host=global_settings.host,
            port=global_settings.port,
        )
    except KeyboardInterrupt:
        logger.info("Received interrupt signal, shutting down...")
    finally:
        logger.info("API Aggregator stopped")


if __name__ == "__main__":
    main()
