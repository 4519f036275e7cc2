from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# 프로젝트 루트의 .env 파일 명시적 로딩
project_root = Path(__file__).parent.parent
env_path = project_root / ".env"

if env_path.exists():
    load_dotenv(env_path)

from fastapi import FastAPI

from publisher_feeds.utils.logging import configure_logging

from .routes import router

configure_logging(
    os.getenv("STRUCTLOG_LEVEL", "INFO"),
    json_enabled=os.getenv("LOG_JSON", "").strip().lower() in ("1", "true", "yes"),
)

app = FastAPI(title="BookCAT Publisher Feeds", version="0.1.0")

app.include_router(router)


@app.get("/healthz", tags=["system"])
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}
