from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
from typing import List, Optional, Dict, Any
import logging

from yt_research import __version__, recovery, research
from yt_research.config import describe_active_models, get_app_config
from yt_research.errors import ResearchError, GENERIC_FAILURE_MESSAGE
from yt_research.query_input import InputType, classify_query
from yt_research.types import OUTPUT_FORMATS

# Configure logging
logging.basicConfig(
    level=get_app_config().log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("api")

app = FastAPI(
    title="YouTube Research API",
    description="Cross-video transcript pattern research",
    version=__version__,
)

# Configure CORS
origins = [
    "http://localhost:3000",
    "http://localhost:8501",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Models ---

class AnalyzeRequest(BaseModel):
    query: str
    output_format: str = "detailed"

class RecoverRequest(BaseModel):
    text: str

class Source(BaseModel):
    uri: str
    title: str

class AnalyzeResponse(BaseModel):
    topic: str
    datasetOverview: Dict[str, Any]
    processedVideos: List[Dict[str, Any]]
    aggregatedThemes: List[Dict[str, Any]]
    commonConfusionPoints: List[Dict[str, Any]]
    disagreements: List[Dict[str, Any]]
    impliedQuestions: List[Dict[str, Any]]
    sources: List[Source] = []

class RecoverResponse(BaseModel):
    data: Any
    repaired: bool
    appended: Optional[str] = None

# --- Endpoints ---

@app.get("/api/status")
def get_status():
    """System health check"""
    try:
        return {"status": "online", "models": describe_active_models(), "version": __version__}
    except (RuntimeError, ValueError) as e:
        logger.error(f"Status check failed: {e}")
        return {"status": "degraded", "error": str(e)}

@app.post("/api/analyze", response_model=AnalyzeResponse)
def analyze(request: AnalyzeRequest):
    """Run a research query against Gemini and return the recovered report"""
    validated = classify_query(request.query)
    if validated.type == InputType.NONE:
        raise HTTPException(status_code=400, detail="Query must not be empty")
    if not validated.all_valid:
        bad = ", ".join(item.text for item in validated.invalid_items)
        raise HTTPException(status_code=400, detail=f"Invalid YouTube URLs: {bad}")
    if request.output_format not in OUTPUT_FORMATS:
        raise HTTPException(status_code=400, detail=f"output_format must be one of {list(OUTPUT_FORMATS)}")

    try:
        return research.analyse_topic(request.query, request.output_format)
    except ResearchError as e:
        logger.warning(f"Research failed for {request.query!r}: {e}")
        raise HTTPException(status_code=502, detail=e.user_message)
    except Exception as e:
        logger.exception(f"Research crashed for {request.query!r}: {e}")
        raise HTTPException(status_code=500, detail=GENERIC_FAILURE_MESSAGE)

@app.post("/api/recover", response_model=RecoverResponse)
def recover(request: RecoverRequest):
    """Recover a (possibly truncated) raw model response into JSON"""
    try:
        data = recovery.parse(request.text)
    except ResearchError as e:
        raise HTTPException(status_code=422, detail=e.user_message)

    trimmed = request.text.strip()
    repaired = recovery.repair_truncated_json(trimmed)
    was_valid = repaired == trimmed
    return RecoverResponse(
        data=data,
        repaired=not was_valid,
        appended=None if was_valid else repaired[len(trimmed):],
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
