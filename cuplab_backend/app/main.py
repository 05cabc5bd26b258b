# cuplab_backend/app/main.py: rule-validation service entrypoint
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from cuplab_backend.app.config import APP_ENV, validate_manifest
from cuplab_backend.app.routers import quality

app = FastAPI(title="CupLab Quality Rules API")

# --- CORS for the template editor / grading UI dev server --------------------
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routers -----------------------------------------------------------------
app.include_router(quality.router)

# --- Health ------------------------------------------------------------------
@app.get("/health")
async def health():
    manifest = validate_manifest()
    return {"ok": manifest["status"] == "ok", "env": APP_ENV, "manifest": manifest}
