"""
Entry point for the Country Records Backend
"""

import logging
from dotenv import load_dotenv

# Load environment variables from .env file before settings are read
load_dotenv()

from country_records.app import create_app, setup_logging
from country_records.config.settings import PORT

setup_logging()
logger = logging.getLogger(__name__)

app = create_app()

if __name__ == "__main__":
    import uvicorn
    logger.info(f"Starting Country Records Backend on port {PORT}")
    uvicorn.run(app, host="0.0.0.0", port=PORT)
