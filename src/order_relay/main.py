"""Run the order relay with uvicorn."""

import uvicorn

from order_relay.api.app import create_app
from order_relay.config import Settings
from order_relay.containers import build_container


def main(settings: Settings | None = None) -> None:
    """Serve the API on the configured port."""
    resolved_settings = settings or Settings()
    app = create_app(build_container(resolved_settings))
    uvicorn.run(app, host="0.0.0.0", port=resolved_settings.port)  # noqa: S104


if __name__ == "__main__":
    main()
