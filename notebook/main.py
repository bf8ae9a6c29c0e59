import logging

# Log configuration (before other imports)
# ruff: noqa: E402
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    force=True
)

from fastapi import FastAPI  # noqa: E402
from fastapi.middleware.cors import CORSMiddleware  # noqa: E402
from notebook import config  # noqa: E402
from notebook.api.base import api_router  # noqa: E402
from notebook.api.errors import register_error_handlers  # noqa: E402

app = FastAPI(
    title="Notebook Backend API",
    description="Backend API for shared notes and folders",
    version="1.0.0"
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Include all API routes
app.include_router(api_router)


@app.get("/")
def read_root():
    return {
        "message": "Notebook Backend API",
        "docs": "/docs",
        "version": "1.0.0"
    }
