import uvicorn
import logging
from auction_server.config import get_settings
from auction_server.api import app, get_engine

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


def main():
    # Build the engine (and seed it) before accepting requests
    engine = get_engine()
    logger.info(f"Serving {len(engine.snapshots.get_all())} auction item(s)")

    # Railway and other PaaS providers set PORT environment variable
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    main()
