import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tradebook.core.config import settings
from tradebook.core.logging_setup import configure_logging
from tradebook.api.routes.auth import router as auth_router
from tradebook.api.routes.account_receivables import router as ar_router
from tradebook.api.routes.account_payables import router as ap_router
from tradebook.api.routes.transactions import router as tx_router
from tradebook.api.routes.ledger import router as ledger_router
from tradebook.api.routes.audit import router as audit_router

configure_logging(settings.log_level)
log = logging.getLogger(__name__)

app = FastAPI(title="tradebook")

origins = [o.strip() for o in (settings.cors_origins or "").split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.exception_handler(Exception)
async def _unhandled(request: Request, exc: Exception):
    log.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "internal_error"})

@app.get("/health")
@app.get("/api/health")
def health():
    return {"status": "ok"}

app.include_router(auth_router)
app.include_router(ar_router)
app.include_router(ap_router)
app.include_router(tx_router)
app.include_router(ledger_router)
app.include_router(audit_router)
