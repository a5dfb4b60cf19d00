import logging
import sys

def setup_logging():
    """
    Configure structured logging for the application.
    
    Sets up logging to stdout with timestamps, log levels, and module names.
    Onboarding analytics events written by the log sink go through the same handler.
    """
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)]
    )
    
    # Reduce SQLAlchemy noise in logs
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    
    return logging.getLogger("nestmap")


# Create global logger instance
logger = setup_logging()
