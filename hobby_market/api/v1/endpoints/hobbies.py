import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from hobby_market.core.errors import NotSignedInError, PublishValidationError, StoreError
from hobby_market.core.firebase import FirebaseHandle, get_firebase
from hobby_market.schemas.common import ErrorResponse
from hobby_market.schemas.hobby import HobbyPublish
from hobby_market.schemas.session import SessionUser
from hobby_market.schemas.views import BrowseState, DetailState, PublishStatus
from hobby_market.services.auth import get_current_user
from hobby_market.services.publish_service import publish_hobby
from hobby_market.views.browse import BrowseView
from hobby_market.views.detail import DetailView
from hobby_market.views.landing import SUCCESS_MESSAGE

log = logging.getLogger(__name__)
router = APIRouter()

_DETAIL_STATUS = {"ready": 200, "not-found": 404, "error": 503}


@router.get("/hobbies", response_model=BrowseState, responses={503: {"model": BrowseState}})
async def list_hobbies(firebase: FirebaseHandle = Depends(get_firebase)) -> JSONResponse:
    view = BrowseView(firebase)
    try:
        state = await view.load()
    finally:
        view.unmount()
    status_code = 503 if state.state == "error" else 200
    return JSONResponse(status_code=status_code, content=state.model_dump(mode="json"))


@router.get(
    "/hobbies/{hobby_id}",
    response_model=DetailState,
    responses={404: {"model": DetailState}, 503: {"model": DetailState}},
)
async def get_hobby(hobby_id: str, firebase: FirebaseHandle = Depends(get_firebase)) -> JSONResponse:
    view = DetailView(firebase)
    try:
        state = await view.load(hobby_id)
    finally:
        view.unmount()
    return JSONResponse(status_code=_DETAIL_STATUS.get(state.state, 200), content=state.model_dump(mode="json"))


@router.post(
    "/hobbies",
    status_code=201,
    response_model=PublishStatus,
    responses={401: {"model": ErrorResponse}, 422: {"model": ErrorResponse}, 502: {"model": ErrorResponse}},
)
async def create_hobby(
    payload: HobbyPublish,
    user: SessionUser | None = Depends(get_current_user),
    firebase: FirebaseHandle = Depends(get_firebase),
) -> PublishStatus | JSONResponse:
    try:
        hobby_id = await publish_hobby(firebase, user=user, form=payload)
    except NotSignedInError as e:
        return JSONResponse(status_code=401, content=ErrorResponse.from_error(e).model_dump())
    except PublishValidationError as e:
        return JSONResponse(status_code=422, content=ErrorResponse.from_error(e).model_dump())
    except StoreError as e:
        log.exception("publish failed for %s", user.uid if user else None)
        return JSONResponse(status_code=502, content=ErrorResponse.from_error(e).model_dump())
    except Exception:
        # credential refresh and transport failures surface outside GoogleAPIError
        log.exception("publish failed for %s", user.uid if user else None)
        err = StoreError("Unable to publish hobby")
        return JSONResponse(status_code=502, content=ErrorResponse.from_error(err).model_dump())

    return PublishStatus(type="success", message=SUCCESS_MESSAGE, hobby_id=hobby_id)
