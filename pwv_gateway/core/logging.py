# pwv_gateway/core/logging.py
import logging
import sys
from datetime import datetime, timezone
from typing import Dict, Any
from pythonjsonlogger import jsonlogger


LOGGER_NAME = "pwv"


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    """Custom JSON formatter for structured logging"""
    
    def add_fields(self, log_record: Dict[str, Any], record: logging.LogRecord, message_dict: Dict[str, Any]):
        super().add_fields(log_record, record, message_dict)
        
        if not log_record.get("timestamp"):
            log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        
        if record.name:
            log_record["logger"] = record.name
        
        log_record["level"] = record.levelname
        
        if hasattr(record, "request_id"):
            log_record["request_id"] = record.request_id


def setup_logging(level: str = "INFO") -> logging.Logger:
    """Configure structured JSON logging for the pwv logger tree"""
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level.upper())
    logger.propagate = False
    
    # Reconfiguring must not stack handlers
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    
    console_handler = logging.StreamHandler(sys.stdout)
    formatter = CustomJsonFormatter(
        "%(timestamp)s %(level)s %(logger)s %(message)s"
    )
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)
    
    return logger


def get_logger(name: str) -> logging.Logger:
    """Child logger of the pwv tree, e.g. ``pwv.executors.vault_cli``"""
    _, _, suffix = name.partition("pwv_gateway.")
    return logging.getLogger(f"{LOGGER_NAME}.{suffix or name}")


# Initialize logger
logger = setup_logging()
