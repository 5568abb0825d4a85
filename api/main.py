"""
FastAPI Backend for SMS Transaction Extractor
RESTful API endpoints for classifying and extracting SMS transactions
"""

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from typing import List
from pathlib import Path
from datetime import datetime
import logging
import sys

# Add backend to path
backend_path = Path(__file__).parent.parent / 'backend'
sys.path.insert(0, str(backend_path))

# Import backend modules
from config import config
from extractors.sms_classifier import SmsClassifier
from extractors.sms_extractor import SmsTransactionExtractor
from main import SmsPipeline, TransactionGrouper
from output.writer import generate_pdf_report
from storage.transaction_store import TransactionStore, open_store

logger = logging.getLogger(__name__)

# Initialize FastAPI app
app = FastAPI(
    title="SMS Transaction Extractor API",
    description="Classify bank SMS messages and extract structured transactions",
    version=config.VERSION
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

REPORTS_DIR = config.OUTPUT_DIR / "api_reports"

classifier = SmsClassifier()
extractor = SmsTransactionExtractor()
store: TransactionStore = open_store(config.STORE_PATH)


class MessageRequest(BaseModel):
    text: str = Field(..., description="Raw SMS body")


class BatchRequest(BaseModel):
    messages: List[str] = Field(..., description="SMS bodies to process in order")


def _check_message(text: str):
    is_valid, error = config.validate_message(text)
    if not is_valid:
        raise HTTPException(status_code=400, detail=error)


def _summary_payload() -> dict:
    summary = TransactionGrouper.summarize(store)
    payload = {}
    for direction in ("debit", "credit"):
        payload[direction] = {
            "count": summary[direction]["count"],
            "total": float(summary[direction]["total"]),
            "by_mode": {mode: float(total) for mode, total in summary[direction]["by_mode"].items()},
        }
    payload["net"] = float(summary["net"])
    return payload


@app.get("/")
async def root():
    """Root endpoint - API information"""
    return {
        "message": "SMS Transaction Extractor API",
        "version": config.VERSION,
        "endpoints": {
            "POST /classify": "Check whether a message is financial",
            "POST /extract": "Extract a transaction from one message",
            "POST /messages": "Process and store a batch of messages",
            "GET /transactions/{direction}": "List stored debit or credit transactions",
            "GET /summary": "Totals per direction and mode",
            "POST /report": "Generate PDF report",
            "GET /health": "Health check"
        }
    }


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat()
    }


@app.post("/classify")
async def classify_message(request: MessageRequest):
    """Classify one message as financial or not."""
    _check_message(request.text)
    keyword = classifier.matched_keyword(request.text)
    return {
        "is_financial": keyword is not None,
        "matched_keyword": keyword
    }


@app.post("/extract")
async def extract_message(request: MessageRequest):
    """
    Extract a transaction from one message without storing it.

    - **status**: "extracted", "not_financial" or "failed"
    """
    _check_message(request.text)

    if not classifier.is_financial(request.text):
        return {"status": "not_financial", "transaction": None}

    record = extractor.extract(request.text)
    if record is None:
        return {"status": "failed", "transaction": None}

    return {"status": "extracted", "transaction": record.to_dict()}


@app.post("/messages")
async def process_messages(request: BatchRequest):
    """Run a batch of messages through the pipeline and store the transactions."""
    if not request.messages:
        raise HTTPException(status_code=400, detail="At least one message is required")

    if len(request.messages) > config.MAX_BATCH_SIZE:
        raise HTTPException(
            status_code=400,
            detail=f"Too many messages ({len(request.messages)}). Maximum: {config.MAX_BATCH_SIZE}"
        )

    for text in request.messages:
        _check_message(text)

    pipeline = SmsPipeline(store, classifier=classifier, extractor=extractor)
    try:
        results = pipeline.process_messages(request.messages)
    except Exception as e:
        logger.error(f"Error processing messages: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

    return {
        "status": "success",
        "results": [result.to_dict() for result in results],
        "stats": pipeline.get_stats()
    }


@app.get("/transactions/{direction}")
async def list_transactions(direction: str):
    """
    List stored transactions for one direction.

    - **direction**: "debit" or "credit"
    """
    if direction not in ("debit", "credit"):
        raise HTTPException(status_code=404, detail=f"Unknown direction: {direction}")

    transactions = store.get_transactions(direction)
    return {
        "direction": direction,
        "total": len(transactions),
        "transactions": {txn.key: txn.to_dict() for txn in transactions}
    }


@app.get("/summary")
async def summary():
    """Counts and totals per direction and mode."""
    return _summary_payload()


@app.post("/report")
async def create_report():
    """Generate a PDF report of all stored transactions."""
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    report_filename = f"report_{timestamp}.pdf"
    report_path = REPORTS_DIR / report_filename

    try:
        generate_pdf_report(str(report_path), store.all_transactions())
    except Exception as e:
        logger.error(f"Error generating report: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Error generating report: {str(e)}")

    logger.info(f"Report generated: {report_filename}")
    return {
        "status": "success",
        "report": {
            "filename": report_filename,
            "download_url": f"/reports/{report_filename}",
            "generated_at": datetime.now().isoformat()
        },
        "summary": _summary_payload()
    }


@app.get("/reports/{filename}")
async def download_report(filename: str):
    """
    Download a generated PDF report.

    - **filename**: Name of the report file to download
    """
    report_path = REPORTS_DIR / Path(filename).name

    if not report_path.exists():
        raise HTTPException(status_code=404, detail="Report not found")

    return FileResponse(
        path=str(report_path),
        media_type="application/pdf",
        filename=report_path.name
    )


if __name__ == "__main__":
    import uvicorn
    from logging_config import setup_logging

    setup_logging(log_file=config.LOG_FILE)
    uvicorn.run(app, host=config.API_HOST, port=config.API_PORT)
