from __future__ import annotations

import logging
import os

import uvicorn
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware

from api.schemas import (
    BoundsModel,
    CameraBoundsRequest,
    CameraPoseModel,
    CameraPoseRequest,
    MarkerLayoutItem,
    MarkerLayoutRequest,
    MarkerLayoutResponse,
    PointModel,
    RectModel,
    SelectRequest,
    SelectResponse,
    VisibleLabelsRequest,
    VisibleLabelsResponse,
)
from api.sessions import get_session_registry
from engine.layout import MapMarker, label_candidates, touch_candidates
from engine.projection import WebMercatorProjection
from engine.types import ViewportSize
from geo.bounds import from_camera_pose, from_camera_pose_excluding_padding, to_camera_pose
from labels.overlap import resolve_visible_labels
from labels.view_state import assign_view_states
from markers.types import ScreenRect

logging.basicConfig(
    level=(os.getenv("KATMAPS_LOG_LEVEL") or "INFO").strip().upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI()

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health():
    return {"status": "ok"}


@app.post("/camera/pose", response_model=CameraPoseModel)
def camera_pose(body: CameraPoseRequest):
    pose = to_camera_pose(
        body.bounds.to_domain(), body.viewport.width, body.viewport.height
    )
    return CameraPoseModel.from_domain(pose)


@app.post("/camera/bounds", response_model=BoundsModel)
def camera_bounds(body: CameraBoundsRequest):
    pose = body.pose.to_domain()
    if body.padding is None:
        bounds = from_camera_pose(pose, body.viewport.width, body.viewport.height)
    else:
        bounds = from_camera_pose_excluding_padding(
            pose,
            body.scaleStrategy,
            body.padding.to_domain(),
            body.viewport.width,
            body.viewport.height,
        )
    return BoundsModel.from_domain(bounds)


@app.post("/labels/visible", response_model=VisibleLabelsResponse)
def labels_visible(body: VisibleLabelsRequest):
    candidates = [c.to_domain() for c in body.candidates]
    visible = resolve_visible_labels(candidates, priority_id=body.priorityId)
    ordered: list[str] = []
    seen: set[str] = set()
    for c in candidates:
        if c.id in visible and c.id not in seen:
            seen.add(c.id)
            ordered.append(c.id)
    return VisibleLabelsResponse(visibleIds=ordered)


@app.post("/markers/layout", response_model=MarkerLayoutResponse)
def markers_layout(body: MarkerLayoutRequest):
    pose = body.pose.to_domain()
    viewport = ViewportSize(width_dp=body.viewport.width, height_dp=body.viewport.height)
    projection = WebMercatorProjection(pose=pose)
    markers = [
        MapMarker(
            id=m.id,
            position=m.position.to_domain(),
            icon_size_px=m.iconSize.as_tuple(),
            label_size_px=m.labelSize.as_tuple() if m.labelSize else None,
            expanded_icon_size_px=(
                m.expandedIconSize.as_tuple() if m.expandedIconSize else None
            ),
        )
        for m in body.markers
    ]

    touch = touch_candidates(
        markers, projection, pose, viewport, density=body.density, expanded_id=body.selectedId
    )
    labels = label_candidates(
        markers, projection, pose, viewport, density=body.density, priority_id=body.selectedId
    )
    visible = resolve_visible_labels(labels, priority_id=body.selectedId)
    on_screen = [t.id for t in touch]
    selected = body.selectedId if body.selectedId in on_screen else None
    states = assign_view_states(on_screen, visible, selected_id=selected)
    label_rects = {c.id: c.rect for c in labels}

    items: list[MarkerLayoutItem] = []
    for t in touch:
        state = states[t.id]
        label_rect = label_rects.get(t.id) if state.shows_label else None
        items.append(
            MarkerLayoutItem(
                id=t.id,
                state=state.value,
                zIndex=state.z_index,
                screenPosition=PointModel(x=t.screen_position.x, y=t.screen_position.y),
                hitRect=_rect_model(t.hit_rect),
                labelRect=_rect_model(label_rect) if label_rect is not None else None,
            )
        )
    return MarkerLayoutResponse(markers=items)


@app.post("/sessions/{session_id}/select", response_model=SelectResponse)
def session_select(session_id: str, body: SelectRequest):
    selected = get_session_registry().select(
        session_id,
        body.tap.to_domain(),
        [c.to_domain() for c in body.candidates],
        density=body.density,
    )
    return SelectResponse(selectedId=selected)


@app.delete("/sessions/{session_id}", status_code=204)
def session_reset(session_id: str):
    if get_session_registry().drop(session_id):
        logger.info("dropped selection session %s", session_id)
    return Response(status_code=204)


def _rect_model(r: ScreenRect) -> RectModel:
    return RectModel(left=r.left, top=r.top, right=r.right, bottom=r.bottom)


def run() -> None:
    """Starts the uvicorn server."""
    port = int(os.getenv("KATMAPS_PORT", 8000))
    reload = bool(int(os.getenv("KATMAPS_DEBUG", 0)))
    uvicorn.run("main:app", host="0.0.0.0", port=port, reload=reload)


if __name__ == "__main__":
    run()
