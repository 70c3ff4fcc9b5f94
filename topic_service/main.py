"""
ForumHub topic service: topics and answers, authorized with access tokens
issued by the user service. Port 8080 by default.
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI

from topic_service.answers import router as answers_router
from topic_service.database import SessionLocal, init_db, seed_courses
from topic_service.errors import register_exception_handlers
from topic_service.topics import router as topics_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and seed configured courses on startup."""
    init_db()
    db = SessionLocal()
    try:
        seed_courses(db)
    finally:
        db.close()
    yield


app = FastAPI(title="ForumHub Topic Service", version="1.0.0", lifespan=lifespan)
register_exception_handlers(app)
app.include_router(topics_router, tags=["topics"])
app.include_router(answers_router, tags=["answers"])


@app.get("/health")
def health():
    """Health check endpoint."""
    return {"status": "ok", "service": "topic_service"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "topic_service.main:app",
        host="127.0.0.1",
        port=8080,
        reload=True,
    )
