#!/usr/bin/env python3
"""
Tag-affinity ranking server: entrypoint for `python -m service.server`.

For uvicorn use service.app:app.
"""

import logging

from .app import app
from .config import get_config

if __name__ == "__main__":
    import uvicorn

    config = get_config()
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=config.host, port=config.port, log_level=config.log_level.lower())
