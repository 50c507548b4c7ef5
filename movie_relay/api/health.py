from fastapi import APIRouter

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/test")
async def liveness() -> dict[str, str]:
    return {"message": "API is working!"}
