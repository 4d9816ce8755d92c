"""Root and health endpoints."""

from fastapi import APIRouter

router = APIRouter()


@router.get("/")
def root():
    return {"status": "ok", "service": "tag-affinity ranking engine"}


@router.get("/health")
def health():
    return {"status": "healthy"}
