# run_dev.py
import os

from dotenv import load_dotenv

# .env antes de importar settings / uvicorn
if os.path.exists(".env"):
    load_dotenv(".env")

APP_MODULE = os.getenv("APP_MODULE", "microblog.main:app")


def _flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip() in ("1", "true", "True", "yes", "on")


def main():
    import uvicorn

    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    reload_flag = _flag("RELOAD", True)

    print(f"🔗 API local: http://127.0.0.1:{port}")
    print(f"🌀 reload={'ON' if reload_flag else 'OFF'}")

    uvicorn.run(
        APP_MODULE,
        host=host,
        port=port,
        reload=reload_flag,
        reload_dirs=["microblog"],
        timeout_keep_alive=30,
        log_level=os.getenv("LOG_LEVEL", "info"),
        lifespan="on",
    )


if __name__ == "__main__":
    main()
