# taskboard/api/auth.py
"""
Identity routes. Tokens are issued by the external identity provider;
this router only reports who the current bearer is.
"""
from fastapi import APIRouter, Depends

from taskboard.api.responses import success
from taskboard.core.security import get_current_user
from taskboard.models import UserPublic

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.get("/me")
async def read_current_user(user: UserPublic = Depends(get_current_user)):
    return success(user.model_dump(mode="json", by_alias=True))
