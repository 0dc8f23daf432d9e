import sys
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import Depends, FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

from .config import get_settings
from .datasources.github_adapter import GitHubAdapter
from .errors import RepoFinderError
from .schemas import HealthResponse, ResultsResponse, SearchRequest, SearchResponse
from .services.history_service import HistoryService
from .services.search_service import SearchService
from .storage.database import Database
from .storage.search_store import SearchStore

settings = get_settings()
logger.remove()
logger.add(sys.stderr, level=settings.log_level.upper())

ENDPOINTS = {
    "search": "POST /api/search",
    "results": "GET /api/results",
    "results_by_keyword": "GET /api/results/:keyword",
    "health": "GET /api/health",
}

github = GitHubAdapter(settings)
database = Database(settings.database_url, access_key=settings.database_key)
search_store = SearchStore(database)
search_service = SearchService(github, search_store)
history_service = HistoryService(search_store)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.database_create_tables:
        await database.create_tables()
    logger.info("GitHub Repository Finder API ready")
    for name, route in ENDPOINTS.items():
        logger.info(f"   {route} ({name})")
    yield
    await github.aclose()
    await database.dispose()


app = FastAPI(title="GitHub Repository Finder", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def get_search_service() -> SearchService:
    return search_service


def get_history_service() -> HistoryService:
    return history_service


@app.exception_handler(RepoFinderError)
async def repo_finder_error_handler(request: Request, exc: RepoFinderError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path"))
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    return JSONResponse(status_code=400, content={"error": message})


@app.get("/")
async def index():
    return {
        "message": "GitHub Repository Finder API",
        "status": "running",
        "endpoints": ENDPOINTS,
    }


@app.get("/api/health", response_model=HealthResponse)
async def health():
    return HealthResponse(
        status="OK",
        message="GitHub Repository Finder API is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
    )


@app.post("/api/search", response_model=SearchResponse)
async def search(body: SearchRequest, service: SearchService = Depends(get_search_service)):
    try:
        outcome = await service.search(body.keyword, page=body.page, per_page=body.per_page)
    except RepoFinderError:
        raise
    except Exception as exc:
        logger.exception(f"Search API error: {exc}")
        raise RepoFinderError("An error occurred while searching repositories") from exc
    return SearchResponse(data=outcome.to_data())


@app.get("/api/results", response_model=ResultsResponse)
async def results(
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1),
    service: HistoryService = Depends(get_history_service),
):
    try:
        history = await service.list_all(page=page, limit=limit)
    except RepoFinderError:
        raise
    except Exception as exc:
        logger.exception(f"Results API error: {exc}")
        raise RepoFinderError("An error occurred while fetching results") from exc
    return ResultsResponse(data=history.records, pagination=history.pagination)


@app.get("/api/results/{keyword}", response_model=ResultsResponse)
async def results_by_keyword(
    keyword: str,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1),
    service: HistoryService = Depends(get_history_service),
):
    try:
        history = await service.list_by_keyword(keyword, page=page, limit=limit)
    except RepoFinderError:
        raise
    except Exception as exc:
        logger.exception(f"Keyword search error: {exc}")
        raise RepoFinderError("An error occurred while searching for keyword results") from exc
    return ResultsResponse(data=history.records, pagination=history.pagination)


def run():
    import uvicorn

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
