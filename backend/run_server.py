#!/usr/bin/env python3
"""
API server entry point for StudyDocs search.

Equivalent to ``uvicorn studydocs.main:app --host $API_HOST --port $API_PORT``
run from the backend directory.
"""

import sys
import logging
from pathlib import Path

import uvicorn

# Add the backend directory to Python path
sys.path.insert(0, str(Path(__file__).parent))

from studydocs.core.config import settings

logger = logging.getLogger(__name__)

def main():
    """Start the API server."""
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    logger.info(f"Starting StudyDocs search API on {settings.API_HOST}:{settings.API_PORT}")

    uvicorn.run(
        "studydocs.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        workers=settings.API_WORKERS,
        log_level="info",
    )

if __name__ == '__main__':
    main()
