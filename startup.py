import os
import sys
import uvicorn
import logging
import traceback

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger(__name__)

# Add the src directory to Python path
current_dir = os.path.dirname(os.path.abspath(__file__))
src_path = os.path.join(current_dir, 'src')
sys.path.insert(0, src_path)

logger.info("=" * 60)
logger.info("MediBook Backend Startup")
logger.info("=" * 60)
logger.info(f"Python version: {sys.version.split()[0]}")
logger.info(f"Source path: {src_path}")

# Log critical environment variables (without exposing full secrets)
logger.info("Environment Configuration:")
logger.info(f"  PORT: {os.environ.get('PORT', '8000')}")
logger.info(f"  APP_ENV: {os.environ.get('APP_ENV', 'not set')}")
logger.info(f"  MONGO_BACKEND: {os.environ.get('MONGO_BACKEND', 'mongo')}")
logger.info(f"  MONGO_URI: {'set' if os.environ.get('MONGO_URI') else 'not set'}")
logger.info(f"  MONGO_DB_NAME: {os.environ.get('MONGO_DB_NAME', 'not set')}")
logger.info(f"  SECURITY_API_KEYS: {'set' if os.environ.get('SECURITY_API_KEYS') else 'not set'}")

if __name__ == "__main__":
    try:
        from medibook.core.config import get_settings
        settings = get_settings()
        port = int(os.environ.get("PORT", settings.port))
        host = os.environ.get("HOST", settings.host)

        logger.info(f"Starting application on {host}:{port}")

        # Test import before starting
        try:
            from medibook.main import app
            logger.info("Successfully imported medibook.main")
        except Exception as import_error:
            logger.error(f"Failed to import medibook.main: {import_error}")
            logger.error(traceback.format_exc())
            sys.exit(1)

        uvicorn.run(
            app,
            host=host,
            port=port,
            log_level=settings.logging.level.lower(),
        )
    except Exception as e:
        logger.error(f"Fatal error during startup: {e}")
        logger.error(traceback.format_exc())
        sys.exit(1)
