import logging
from config.settings import settings

logger = logging.getLogger(__name__)

def validate_env_variables() -> bool:
    """Validate required environment variables"""
    required_vars = {
        'CLICK_SECRET_KEY': settings.CLICK_SECRET_KEY,
    }

    missing_vars = [name for name, value in required_vars.items() if not value]

    if missing_vars:
        logger.error(f"Missing required environment variables: {', '.join(missing_vars)}")
        logger.warning("Click signatures will be rejected until the .env file is fixed.")
        return False

    logger.info("All required environment variables are set")
    return True
