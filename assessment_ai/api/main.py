import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from assessment_ai.api.routes.ai_import import router as ai_import_router
from assessment_ai.config import settings

logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = FastAPI(
    title="Assessment Import API",
    description="Natural-language import of assessments and study tasks",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:3009",
    ],
    allow_origin_regex=r"https://.*\.vercel\.app|http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ai_import_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy", "llm_configured": str(settings.has_llm).lower()}
