from flask import Flask
import logging
import os
from pathlib import Path
from dotenv import load_dotenv

from .config import DEFAULT_HOST, DEFAULT_PORT
from .routes import blocks_bp

logger = logging.getLogger(__name__)

# Project root (parent of src/)
project_root = Path(__file__).resolve().parent.parent.parent


def load_environment():
    """Load environment variables from .env (project root, then working directory)

    Returns the path that was loaded, or None.
    """
    env_paths = [
        project_root / ".env",
        Path.cwd() / ".env"
    ]

    for env_path in env_paths:
        if env_path.exists():
            load_dotenv(env_path)
            return env_path

    return None


def create_app():
    app = Flask(__name__)
    app.register_blueprint(blocks_bp)
    return app


def main():
    env_path = load_environment()
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    if env_path:
        logger.info(f"✓ Loaded environment variables from {env_path}")
    else:
        logger.warning("No .env file found, using system environment only")

    # Get configuration from environment
    host = os.getenv("FLASK_HOST", DEFAULT_HOST)
    port = int(os.getenv("FLASK_PORT", str(DEFAULT_PORT)))
    debug = os.getenv("FLASK_DEBUG", "false").lower() in ("true", "1", "yes")

    create_app().run(host=host, port=port, debug=debug)


if __name__ == "__main__":
    main()
