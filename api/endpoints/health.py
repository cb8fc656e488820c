from fastapi import APIRouter, HTTPException
from sqlalchemy import text
from infra.db.session import engine

router = APIRouter()


@router.get("/health")
def health():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception as exc:
        raise HTTPException(status_code=503, detail=str(exc))
    return {"status": "ok", "database": "ok"}
