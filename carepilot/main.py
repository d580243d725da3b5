from fastapi import FastAPI
from carepilot.api.routes import optimization
from carepilot.core.logging import configure_logging

configure_logging()

app = FastAPI(title="CarePilot API", version="0.1.0")

app.include_router(optimization.router, prefix="/api/v1")


@app.get("/health")
def health_check():
    return {"status": "ok"}
