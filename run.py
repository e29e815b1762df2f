import logging
import os
import uvicorn
from dotenv import load_dotenv

# .envファイルから環境変数を読み込み
load_dotenv()

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8080


def load_settings() -> dict:
    """環境変数からサーバー設定を取得"""
    return {
        "host": os.getenv("API_HOST", DEFAULT_HOST),
        "port": int(os.getenv("API_PORT", DEFAULT_PORT)),
        "log_level": os.getenv("LOG_LEVEL", "info").lower(),
        "reload": os.getenv("API_RELOAD", "").lower() in ("1", "true", "yes"),
    }


def start_server():
    settings = load_settings()

    logging.basicConfig(
        level=settings["log_level"].upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    logger = logging.getLogger("run")

    logger.info("FastAPIサーバーを起動中...")
    logger.info("  - Host: %s", settings["host"])
    logger.info("  - Port: %s", settings["port"])
    logger.info("API: http://%s:%s", settings["host"], settings["port"])
    logger.info("Docs: http://%s:%s/docs", settings["host"], settings["port"])

    uvicorn.run(
        "main:app",
        host=settings["host"],
        port=settings["port"],
        log_level=settings["log_level"],
        reload=settings["reload"],
    )


if __name__ == "__main__":
    start_server()
