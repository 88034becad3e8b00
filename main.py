"""
File: main.py
File ini adalah file utama untuk menjalankan API audit smart contract berbasis LLM (tool calling) dan mengembalikan laporan yang sudah dinormalisasi.
"""


import uvicorn
import logging
from fastapi import FastAPI, Body, Depends, Request
from fastapi.responses import JSONResponse

from dotenv import load_dotenv
load_dotenv()

import llm_analyzer
from config import settings
from errors import AuditError
from models import AnalysisResponse, ContractInput, ErrorResponse

# konfigurasi logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="SmartAuditor",
    description="Audit smart contract menggunakan LLM dengan tool calling, hasilnya dinormalisasi menjadi enam metrik kanonik.",
    version="1.0.0"
)

def get_llm_client() -> llm_analyzer.LLMClient:
    """
    Membuat client LLM dari konfigurasi server. API key tidak diterima per request.
    """
    provider = settings.LLM_PROVIDER
    return llm_analyzer.LLMClient.from_provider(
        provider,
        api_key=settings.api_key_for(provider),
        model=settings.LLM_MODEL,
        base_url=settings.LLM_BASE_URL,
        timeout=settings.LLM_TIMEOUT_SECONDS,
        force_tool_call=settings.LLM_FORCE_TOOL_CALL,
    )

@app.exception_handler(AuditError)
async def audit_error_handler(_: Request, exc: AuditError):
    logger.error(f"Analisis kontrak gagal: {type(exc).__name__} - {exc}")
    return JSONResponse(status_code=500, content={"error": str(exc)})

@app.exception_handler(Exception)
async def unhandled_error_handler(_: Request, exc: Exception):
    logger.exception(f"Error tak terduga saat analisis kontrak: {exc}")
    return JSONResponse(status_code=500, content={"error": "Failed to analyze the contract"})

@app.post(
    "/api/contract-analysis",
    response_model=AnalysisResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Contract Analysis",
)
async def contract_analysis(
        body: ContractInput = Body(..., description="Source code kontrak yang akan diaudit."),
        client: llm_analyzer.LLMClient = Depends(get_llm_client),
    ):
    """
    Endpoint untuk audit smart contract
    1. Bangun prompt dan tool schema
    2. Jalankan analisis LLM
    3. Kembalikan hasil yang sudah dinormalisasi
    """
    logger.info(f"Menerima kontrak untuk dianalisis ({len(body.contract)} karakter).")
    results = await llm_analyzer.analyze_contract(body.contract, client)
    return AnalysisResponse(results=results)

@app.get("/", summary="Health Check")
def read_root():
    return {"status": "Auditor service is running."}

if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
