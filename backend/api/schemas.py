from __future__ import annotations

from pydantic import BaseModel, Field

from engine.config import get_config
from geo.bounds import CameraPose, MapBounds, Padding, ScaleStrategy
from geo.coordinates import GeoCoordinate
from geo.units import Length
from markers.types import LabelCandidate, ScreenPoint, ScreenRect, TouchCandidate


class GeoCoordinateModel(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)

    def to_domain(self) -> GeoCoordinate:
        return GeoCoordinate(latitude=self.lat, longitude=self.lon)

    @classmethod
    def from_domain(cls, c: GeoCoordinate) -> "GeoCoordinateModel":
        n = c.normalized()
        return cls(lat=n.latitude, lon=n.longitude)


class PaddingModel(BaseModel):
    top: float = 0.0
    bottom: float = 0.0
    left: float = 0.0
    right: float = 0.0

    def to_domain(self) -> Padding:
        return Padding(top=self.top, bottom=self.bottom, left=self.left, right=self.right)

    @classmethod
    def from_domain(cls, p: Padding) -> "PaddingModel":
        return cls(top=p.top, bottom=p.bottom, left=p.left, right=p.right)


class ViewportModel(BaseModel):
    # dp; zero/negative sizes are tolerated (treated as 1dp by the viewport math).
    width: float
    height: float


class BoundsModel(BaseModel):
    center: GeoCoordinateModel
    # Omitted radii and padding fall back to the engine config defaults.
    radiusXMeters: float | None = Field(default=None, gt=0.0)
    radiusYMeters: float | None = Field(default=None, gt=0.0)
    bearing: float = 0.0
    tilt: float = Field(default=0.0, ge=0.0, le=90.0)
    padding: PaddingModel | None = None
    scaleStrategy: ScaleStrategy = ScaleStrategy.FIT

    def to_domain(self) -> MapBounds:
        cfg = get_config()
        rx = self.radiusXMeters or cfg.default_radius_m
        ry = self.radiusYMeters or cfg.default_radius_m
        padding = (
            self.padding.to_domain()
            if self.padding is not None
            else Padding.uniform(cfg.default_padding)
        )
        return MapBounds(
            center=self.center.to_domain(),
            radius_x=Length.from_meters(rx),
            radius_y=Length.from_meters(ry),
            bearing=self.bearing % 360.0,
            tilt=self.tilt,
            padding=padding,
            scale_strategy=self.scaleStrategy,
        )

    @classmethod
    def from_domain(cls, b: MapBounds) -> "BoundsModel":
        return cls(
            center=GeoCoordinateModel.from_domain(b.center),
            radiusXMeters=b.radius_x.meters,
            radiusYMeters=b.radius_y.meters,
            bearing=b.bearing,
            tilt=b.tilt,
            padding=PaddingModel.from_domain(b.padding),
            scaleStrategy=b.scale_strategy,
        )


class CameraPoseModel(BaseModel):
    target: GeoCoordinateModel
    zoom: float
    bearing: float = 0.0
    tilt: float = Field(default=0.0, ge=0.0, le=90.0)

    def to_domain(self) -> CameraPose:
        return CameraPose(
            target=self.target.to_domain(),
            zoom=self.zoom,
            bearing=self.bearing,
            tilt=self.tilt,
        )

    @classmethod
    def from_domain(cls, p: CameraPose) -> "CameraPoseModel":
        return cls(
            target=GeoCoordinateModel.from_domain(p.target),
            zoom=p.zoom,
            bearing=p.bearing,
            tilt=p.tilt,
        )


class CameraPoseRequest(BaseModel):
    bounds: BoundsModel
    viewport: ViewportModel


class CameraBoundsRequest(BaseModel):
    pose: CameraPoseModel
    viewport: ViewportModel
    # When set, the response describes the region visible outside this padding.
    padding: PaddingModel | None = None
    scaleStrategy: ScaleStrategy = ScaleStrategy.FIT


class RectModel(BaseModel):
    left: float
    top: float
    right: float
    bottom: float

    def to_domain(self) -> ScreenRect:
        return ScreenRect(left=self.left, top=self.top, right=self.right, bottom=self.bottom)


class PointModel(BaseModel):
    x: float
    y: float

    def to_domain(self) -> ScreenPoint:
        return ScreenPoint(x=self.x, y=self.y)


class LabelCandidateModel(BaseModel):
    id: str
    rect: RectModel
    isPriority: bool = False

    def to_domain(self) -> LabelCandidate:
        return LabelCandidate(id=self.id, rect=self.rect.to_domain(), is_priority=self.isPriority)


class VisibleLabelsRequest(BaseModel):
    candidates: list[LabelCandidateModel] = Field(default_factory=list)
    priorityId: str | None = None


class VisibleLabelsResponse(BaseModel):
    # Candidate order is preserved so the response is deterministic.
    visibleIds: list[str]


class TouchCandidateModel(BaseModel):
    id: str
    hitRect: RectModel
    screenPosition: PointModel

    def to_domain(self) -> TouchCandidate:
        return TouchCandidate(
            id=self.id,
            hit_rect=self.hitRect.to_domain(),
            screen_position=self.screenPosition.to_domain(),
        )


class SelectRequest(BaseModel):
    # Tap position in physical pixels; candidates are in dp.
    tap: PointModel
    candidates: list[TouchCandidateModel] = Field(default_factory=list)
    density: float = Field(default=1.0, gt=0.0)


class SelectResponse(BaseModel):
    selectedId: str | None = None


class SizeModel(BaseModel):
    width: float = Field(ge=0.0)
    height: float = Field(ge=0.0)

    def as_tuple(self) -> tuple[float, float]:
        return (self.width, self.height)


class MarkerModel(BaseModel):
    id: str
    position: GeoCoordinateModel
    # Physical pixels.
    iconSize: SizeModel
    labelSize: SizeModel | None = None
    expandedIconSize: SizeModel | None = None


class MarkerLayoutRequest(BaseModel):
    pose: CameraPoseModel
    viewport: ViewportModel
    markers: list[MarkerModel] = Field(default_factory=list)
    density: float = Field(default=1.0, gt=0.0)
    selectedId: str | None = None


class MarkerLayoutItem(BaseModel):
    id: str
    state: str
    zIndex: float
    screenPosition: PointModel
    hitRect: RectModel
    labelRect: RectModel | None = None


class MarkerLayoutResponse(BaseModel):
    # Only markers the projection places on screen are listed.
    markers: list[MarkerLayoutItem]
