"""HTML routes: landing/publish, browse and detail pages."""

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from hobby_market.core.firebase import FirebaseHandle, get_firebase
from hobby_market.schemas.hobby import HobbyPublish
from hobby_market.schemas.session import SessionUser
from hobby_market.services.auth import get_current_user
from hobby_market.views.browse import EMPTY_TITLE, SUBTITLE, TITLE, BrowseView
from hobby_market.views.detail import DetailView
from hobby_market.views.landing import FEATURES, LandingView
from hobby_market.web.templating import templates

router = APIRouter(include_in_schema=False)

_DETAIL_STATUS = {"ready": 200, "not-found": 404, "error": 503}
_BROWSE_COPY = {"title": TITLE, "subtitle": SUBTITLE, "empty_title": EMPTY_TITLE}


def _render_landing(request: Request, view: LandingView, *, sign_in_failed: bool = False) -> HTMLResponse:
    return templates.TemplateResponse(
        request,
        "landing.html",
        {
            "user": view.user,
            "display": view.display,
            "form": view.form,
            "status": view.status,
            "features": FEATURES,
            "sign_in_failed": sign_in_failed,
        },
    )


@router.get("/", response_class=HTMLResponse)
async def landing(
    request: Request,
    sign_in: str | None = None,
    user: SessionUser | None = Depends(get_current_user),
    firebase: FirebaseHandle = Depends(get_firebase),
) -> HTMLResponse:
    view = LandingView(firebase, user)
    try:
        return _render_landing(request, view, sign_in_failed=sign_in == "failed")
    finally:
        view.unmount()


@router.post("/", response_class=HTMLResponse)
async def publish(
    request: Request,
    title: str = Form(""),
    description: str = Form(""),
    price_per_hour: str = Form(""),
    user: SessionUser | None = Depends(get_current_user),
    firebase: FirebaseHandle = Depends(get_firebase),
) -> HTMLResponse:
    view = LandingView(firebase, user)
    try:
        await view.submit(HobbyPublish(title=title, description=description, price_per_hour=price_per_hour))
        return _render_landing(request, view)
    finally:
        view.unmount()


@router.get("/browse", response_class=HTMLResponse)
async def browse(request: Request, firebase: FirebaseHandle = Depends(get_firebase)) -> HTMLResponse:
    view = BrowseView(firebase)
    try:
        state = await view.load()
    finally:
        view.unmount()
    return templates.TemplateResponse(
        request,
        "browse.html",
        {"view": state, "copy": _BROWSE_COPY},
        status_code=503 if state.state == "error" else 200,
    )


@router.get("/hobbies/{hobby_id}", response_class=HTMLResponse)
async def hobby_detail(
    request: Request,
    hobby_id: str,
    firebase: FirebaseHandle = Depends(get_firebase),
) -> HTMLResponse:
    view = DetailView(firebase)
    try:
        state = await view.load(hobby_id)
    finally:
        view.unmount()
    return templates.TemplateResponse(
        request,
        "detail.html",
        {"view": state},
        status_code=_DETAIL_STATUS.get(state.state, 200),
    )
