# microblog/main.py
import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from microblog.core.json import UTF8JSONResponse
from microblog.core.config import settings
from microblog.db.init_db import init_models

# routers
from microblog.profile.router import router as profile_router, me_router

log = logging.getLogger("uvicorn")

app = FastAPI(
    title="Microblog Profiles API",
    default_response_class=UTF8JSONResponse,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allow_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.on_event("startup")
async def on_startup():
    log.info("🚀 Iniciando servicio…")
    await init_models()
    log.info("✅ Startup listo.")


@app.get("/api/health/")
async def health():
    return {"ok": True, "service": "microblog-profiles", "msg": "healthy ✨"}


app.include_router(profile_router)   # /api/profile/{username}/...
app.include_router(me_router)        # /api/me/profile/
