"""
ForumHub user service: identities, profiles and access tokens.
Port 9000 by default; the topic service verifies tokens against /.well-known/jwks.json.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from user_service.database import SessionLocal, init_db
from user_service.errors import register_exception_handlers
from user_service.keys import get_signing_key
from user_service.seed import seed_from_env
from user_service.token_endpoint import router as token_router
from user_service.users import router as users_router
from user_service.well_known import router as well_known_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables, load signing key, seed profiles (and optional admin) on startup."""
    init_db()
    get_signing_key()
    db = SessionLocal()
    try:
        seed_from_env(db)
    finally:
        db.close()
    yield


app = FastAPI(title="ForumHub User Service", version="1.0.0", lifespan=lifespan)
register_exception_handlers(app)
app.include_router(users_router, tags=["users"])
app.include_router(token_router, tags=["token"])
app.include_router(well_known_router, tags=["well-known"])


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "user_service"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "user_service.main:app",
        host="127.0.0.1",
        port=9000,
        reload=True,
    )
