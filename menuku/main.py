"""FastAPI application serving the MenuKu admin and public menu API."""

import logging
from typing import Dict

from fastapi import FastAPI, HTTPException

from menuku.api.routes import router as api_router
from menuku.config.supabase_client import SUPABASE_ANON_KEY, SUPABASE_URL

app = FastAPI(title="MenuKu")
logger = logging.getLogger(__name__)

app.include_router(api_router)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


@app.get("/api/config")
def supabase_config() -> Dict[str, str]:
    if not SUPABASE_URL or not SUPABASE_ANON_KEY:
        raise HTTPException(status_code=500, detail="Konfigurasi Supabase belum lengkap.")
    return {"supabaseUrl": SUPABASE_URL, "supabaseAnonKey": SUPABASE_ANON_KEY}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run("menuku.main:app", host="127.0.0.1", port=8000, reload=True)
