from fastapi import APIRouter

from app.taxonomy import get_default_keyword_pack_provider

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    return {"status": "healthy", "roles": len(get_default_keyword_pack_provider().role_ids())}
