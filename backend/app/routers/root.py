from fastapi import APIRouter

router = APIRouter(prefix="/api", tags=["Root"])

@router.get("/")
def root():
    return {"message": "Scripture study backend running", "docs": "/docs"}
