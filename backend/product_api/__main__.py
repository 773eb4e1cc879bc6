"""
Product API — Server Entry Point
=================================

What:  `python -m product_api` (or the `product-api` console script) starts
       uvicorn on HOST:PORT from the settings.
How:   uvicorn runs the lifespan before binding the socket, so a database
       that cannot be reached stops the process with a non-zero exit code
       and the port is never opened.
"""

import uvicorn

from product_api.config import settings


def main() -> None:
    uvicorn.run(
        "product_api.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
