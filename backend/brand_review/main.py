import logging
import sys
import time

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.exc import OperationalError

from brand_review import __version__
from brand_review.api.routes import router
from brand_review.config import CORS_ORIGINS, ENV_NAMES, LOG_LEVEL, PORT, get_foundry_config, validate_config
from brand_review.db.models import Base
from brand_review.db.session import engine

logging.basicConfig(
    level=LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Brand Review Assistant",
    version=__version__,
)

# Middleware FIRST
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes AFTER middleware
app.include_router(router)


@app.on_event("startup")
def startup():
    missing = validate_config(get_foundry_config())
    if missing:
        logger.warning("Agent configuration incomplete, missing: %s", ", ".join(ENV_NAMES[k] for k in missing))

    retries = 5
    delay = 2

    for attempt in range(retries):
        try:
            Base.metadata.create_all(bind=engine)
            logger.info("Review log database connected")
            return
        except OperationalError:
            logger.info("Waiting for database... (%d/%d)", attempt + 1, retries)
            time.sleep(delay)

    # Serve without persistence rather than refusing to start
    logger.warning("Database not ready, running without review history")


def run():
    """Console entry point: validate configuration, then serve with uvicorn."""
    import uvicorn

    config = get_foundry_config()
    missing = validate_config(config)
    if missing and not config.use_mock_api:
        logger.error("Missing required environment variables: %s", missing)
        logger.error("Please set these environment variables:")
        for key in missing:
            logger.error("  %s=your_value_here", ENV_NAMES[key])
        sys.exit(1)

    logger.info("Configuration validated")
    logger.info("Brand review proxy running on port %d, health check at http://localhost:%d/health", PORT, PORT)
    uvicorn.run(app, host="0.0.0.0", port=PORT)


if __name__ == "__main__":
    run()
