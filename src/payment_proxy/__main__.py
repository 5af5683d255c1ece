"""Run the payment proxy with uvicorn: ``python -m payment_proxy``."""

import uvicorn

from payment_proxy.api.main import create_app
from payment_proxy.config import settings


def main() -> None:
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
