"""Development entrypoint: ``python main.py`` serves the API with reload."""

import os

from dotenv import load_dotenv

# Settings are read on import, so the .env file has to be loaded first
load_dotenv()

from catering_quotes.main import app  # noqa: E402,F401

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "catering_quotes.main:app",
        host=os.getenv("QUOTES_HOST", "127.0.0.1"),
        port=int(os.getenv("QUOTES_PORT", "8000")),
        reload=os.getenv("QUOTES_RELOAD", "1") == "1",
        workers=int(os.getenv("UVICORN_WORKERS", "1")),
        timeout_keep_alive=int(os.getenv("UVICORN_KEEPALIVE", "65")),
    )
