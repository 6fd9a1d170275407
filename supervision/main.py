import uvicorn

from supervision.api.app import create_app
from supervision.config.settings import Settings
from supervision.logging.logger import Log


def main() -> None:
    """Entry point: load settings -> configure logging -> serve the API and its workers."""
    settings = Settings()
    Log.configure(settings.log_level)
    app = create_app(settings)
    Log.info(f"Starting inspection API on {settings.api_host}:{settings.api_port}")
    uvicorn.run(app, host=settings.api_host, port=settings.api_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
