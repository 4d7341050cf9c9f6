"""Run the portal API with uvicorn on the configured port."""
from __future__ import annotations

import uvicorn

from portal.core.config import get_settings


def main() -> None:
    settings = get_settings()
    uvicorn.run("portal.app_factory:app", host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
