import uvicorn
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from .config import settings
from .error_handlers import validation_exception_handler
from .routes.receipts import router as receipts_router
from .utils.logging import configure_logging

configure_logging(settings.LOG_LEVEL)

app = FastAPI(
    title=settings.APP_NAME,
    description="Scores purchase receipts and serves their reward points",
    version="0.1.0",
)

app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.include_router(receipts_router)

@app.get("/health")
def health():
    return {"ok": True}

def run():
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())

if __name__ == "__main__":
    run()
