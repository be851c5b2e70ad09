from fastapi import APIRouter, Depends

from hobby_market.schemas.session import MeOut, SessionUser
from hobby_market.services.auth import require_user

router = APIRouter()

@router.get("/me", response_model=MeOut)
async def me(user: SessionUser = Depends(require_user)) -> MeOut:
    return MeOut(
        uid=user.uid,
        display_name=user.display_name,
        email=user.email,
        photo_url=user.photo_url,
    )
