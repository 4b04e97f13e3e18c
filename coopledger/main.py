from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from coopledger.api import reports
from coopledger.core.config import settings
from coopledger.db.base import get_db
import logging

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

# Get logger for this module
logger = logging.getLogger(__name__)
logger.info("Starting CoopLedger reporting API")


app = FastAPI(
    title="CoopLedger Reporting API",
    description="Financial reconciliation and reporting for cooperative societies",
    version="2.0.0",
    debug=settings.DEBUG,
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000", "http://127.0.0.1:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(reports.router)


@app.get("/")
def root():
    """Root endpoint."""
    return {"message": "CoopLedger Reporting API", "version": "2.0.0"}


@app.get("/api/health")
def health_check(db: Session = Depends(get_db)):
    """Report whether the record store is reachable."""
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Health check could not reach the record store: {e}")
        return {"status": "degraded", "database": "unreachable"}
    return {"status": "healthy", "database": "connected"}
