#!/usr/bin/env python3
import uvicorn
import logging
import os
from datetime import datetime
from app.core.config import settings

log_dir = settings.LOG_DIR
os.makedirs(log_dir, exist_ok=True)

logger = logging.getLogger()
logger.setLevel(settings.LOG_LEVEL)

console_handler = logging.StreamHandler()
console_handler.setLevel(settings.LOG_LEVEL)

# One log file per process start
log_filename = os.path.join(log_dir, f"app_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log")
file_handler = logging.FileHandler(log_filename, encoding='utf-8')
file_handler.setLevel(settings.LOG_LEVEL)

formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')
console_handler.setFormatter(formatter)
file_handler.setFormatter(formatter)

logger.handlers = []
logger.addHandler(console_handler)
logger.addHandler(file_handler)


if __name__ == "__main__":
    logger.info(f"Starting API server on {settings.HOST}:{settings.PORT}")
    logger.info(f"Log file: {log_filename}")
    uvicorn.run("app.main:app", host=settings.HOST, port=settings.PORT, reload=settings.RELOAD)
