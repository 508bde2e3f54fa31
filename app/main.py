"""ASGI entry point: ``uvicorn app.main:app``."""

import uvicorn

from . import create_app
from .core.config import settings

app = create_app()


if __name__ == "__main__":
    uvicorn.run(app, host=settings.HOST, port=settings.PORT)
