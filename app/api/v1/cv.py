from fastapi import APIRouter, HTTPException, Request

from app.core.rate_limit import rate_limit
from app.schemas.cv import CvAnalyzeRequest, CvAnalyzeResponse
from app.services.cv_service import CvAnalyzeError, analyze_cv_payload

router = APIRouter()


def _raise_analyze_http_error(exc: CvAnalyzeError) -> None:
    raise HTTPException(status_code=exc.status_code, detail={"code": exc.code, "message": str(exc)}) from exc


@router.post(
    "/tools/cv/analyze",
    response_model=CvAnalyzeResponse,
    summary="Analyze CV",
    description="Lint extracted CV text and return category scores, issues and keyword coverage.",
)
@rate_limit()
async def cv_analyze(request: Request, payload: CvAnalyzeRequest):
    _ = request
    try:
        return analyze_cv_payload(
            payload.text,
            payload.target_role,
            extraction_status=payload.extraction_status,
            source=payload.source,
        )
    except CvAnalyzeError as exc:
        _raise_analyze_http_error(exc)
