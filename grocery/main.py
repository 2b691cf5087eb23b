# grocery/main.py
import uvicorn

from grocery.api import create_app
from grocery.data.database import Base, engine
from grocery.data import models  # noqa: F401  registers every table on Base.metadata
from grocery.utils.logging import configure_logging, get_logger

configure_logging()
logger = get_logger(__name__)

logger.info("database_init", tables=sorted(Base.metadata.tables.keys()))
try:
    Base.metadata.create_all(bind=engine)
except Exception as e:
    logger.error("database_init_failed", error=str(e))
    raise

app = create_app()

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
