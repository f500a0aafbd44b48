"""
schema of the supported source datasets (GeoJSON) and of the build configuration

dataset variants:
    ned:        Natural Earth time zones (coarse), https://www.naturalearthdata.com/
    osm_tz:     timezone-boundary-builder (fine grained, fragmented zones), https://github.com/evansiroky/timezone-boundary-builder
    osm_admin:  OpenStreetMap administrative boundaries
    generic:    any feature collection with an ``identifier`` property
"""
import os
from typing import Any, Dict, List, Literal, NamedTuple, Optional, Type, Union

from pydantic import (
    AliasPath,
    BaseModel,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)

from regionfinder.configs import (
    DATASET_GENERIC,
    DATASET_NED,
    DATASET_OSM_ADMIN,
    DATASET_OSM_TZ,
    DEFAULT_CELL_SIZE,
    DEFAULT_EPSILON,
    MERGE_FRAGMENTS_DEFAULT,
    PRECISION_INT32,
    SIMPLIFICATION_PROFILES,
)
from regionfinder.spatial_index import grid_shape


class PolygonGeometry(BaseModel):
    """data representation of a region geometry consisting of a single polygon with holes"""

    type: Literal["Polygon"]
    # depth: 3
    coordinates: List[List[List[float]]]


class MultiPolygonGeometry(BaseModel):
    """data representation of a region geometry consisting of multiple polygons with holes"""

    type: Literal["MultiPolygon"]
    # depth: 4
    coordinates: List[List[List[List[float]]]]


class RegionProperties(NamedTuple):
    """the metadata of a region, independent of the dataset variant"""

    identifier: str
    description: Optional[str] = None
    dst_description: Optional[str] = None
    raw_offset: Optional[int] = None
    raw_dst_offset: Optional[int] = None
    level: Optional[int] = None
    offset: Optional[str] = None
    zone: Optional[float] = None


class Feature(BaseModel):
    """a single region feature. subclasses define how to read the properties"""

    type: Literal["Feature"]
    geometry: Union[PolygonGeometry, MultiPolygonGeometry] = Field(..., discriminator="type")

    def polygon_coordinates(self) -> List[List[List[List[float]]]]:
        """:return: the list of polygons: [exterior, hole1, hole2, ...] with rings [[x,y], ...]"""
        if isinstance(self.geometry, PolygonGeometry):
            return [self.geometry.coordinates]
        return self.geometry.coordinates

    def region_properties(self) -> RegionProperties:
        raise NotImplementedError


class NedTimezone(Feature):
    """Natural Earth time zone. the zone name is not always present: fallback to the offset label"""

    tz_name: Optional[str] = Field(None, validation_alias=AliasPath("properties", "tz_name1st"))
    time_zone: str = Field(..., min_length=1, validation_alias=AliasPath("properties", "time_zone"))
    places: Optional[str] = Field(None, validation_alias=AliasPath("properties", "places"))
    dst_places: Optional[str] = Field(None, validation_alias=AliasPath("properties", "dst_places"))
    # offset in hours, e.g. -3.5
    zone: float = Field(..., validation_alias=AliasPath("properties", "zone"))

    def region_properties(self) -> RegionProperties:
        return RegionProperties(
            identifier=self.tz_name or self.time_zone,
            description=self.places,
            dst_description=self.dst_places,
            raw_offset=int(round(self.zone * 3600)),
            offset=self.time_zone,
            zone=self.zone,
        )


class OsmTimezone(Feature):
    tzid: str = Field(..., min_length=1, validation_alias=AliasPath("properties", "tzid"))
    raw_offset: Optional[int] = Field(None, validation_alias=AliasPath("properties", "raw_offset"))
    raw_dst_offset: Optional[int] = Field(
        None, validation_alias=AliasPath("properties", "raw_dst_offset")
    )

    def region_properties(self) -> RegionProperties:
        return RegionProperties(
            identifier=self.tzid,
            raw_offset=self.raw_offset,
            raw_dst_offset=self.raw_dst_offset,
        )


class OsmAdmin(Feature):
    name: str = Field(..., min_length=1, validation_alias=AliasPath("properties", "name"))
    name_en: Optional[str] = Field(None, validation_alias=AliasPath("properties", "name:en"))
    # NOTE: OSM stores the level as string, e.g. "4"
    admin_level: Optional[int] = Field(None, validation_alias=AliasPath("properties", "admin_level"))

    def region_properties(self) -> RegionProperties:
        return RegionProperties(
            identifier=self.name,
            description=self.name_en,
            level=self.admin_level,
        )


class GenericRegion(Feature):
    identifier: str = Field(..., min_length=1, validation_alias=AliasPath("properties", "identifier"))
    description: Optional[str] = Field(None, validation_alias=AliasPath("properties", "description"))
    dst_description: Optional[str] = Field(
        None, validation_alias=AliasPath("properties", "dst_description")
    )
    raw_offset: Optional[int] = Field(None, validation_alias=AliasPath("properties", "raw_offset"))
    raw_dst_offset: Optional[int] = Field(
        None, validation_alias=AliasPath("properties", "raw_dst_offset")
    )
    level: Optional[int] = Field(None, validation_alias=AliasPath("properties", "level"))
    offset: Optional[str] = Field(None, validation_alias=AliasPath("properties", "offset"))
    zone: Optional[float] = Field(None, validation_alias=AliasPath("properties", "zone"))

    def region_properties(self) -> RegionProperties:
        return RegionProperties(
            identifier=self.identifier,
            description=self.description,
            dst_description=self.dst_description,
            raw_offset=self.raw_offset,
            raw_dst_offset=self.raw_dst_offset,
            level=self.level,
            offset=self.offset,
            zone=self.zone,
        )


FEATURE_MODELS: Dict[str, Type[Feature]] = {
    DATASET_NED: NedTimezone,
    DATASET_OSM_TZ: OsmTimezone,
    DATASET_OSM_ADMIN: OsmAdmin,
    DATASET_GENERIC: GenericRegion,
}


class FeatureCollection(BaseModel):
    """schema for a region dataset in GeoJSON format

    NOTE: the features are validated one by one with the model of the dataset variant
    """

    type: Literal["FeatureCollection"]
    features: List[Dict[str, Any]]


def _default_workers() -> int:
    return os.cpu_count() or 1


class BuildConfig(BaseModel):
    """parameters of a cache build"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    dataset: Literal["ned", "osm_tz", "osm_admin", "generic"] = DATASET_GENERIC
    # coordinate storage: fixed point int32 (~1cm accuracy) or float64
    precision: Literal["int32", "float64"] = PRECISION_INT32
    # simplification tolerance in degree. 0 disables the simplification
    epsilon: float = Field(DEFAULT_EPSILON, ge=0.0)
    profile: Optional[Literal["default", "extrasimplified", "unsimplified"]] = None
    # edge length of the spatial index grid cells in degree
    cell_size: float = Field(DEFAULT_CELL_SIZE, gt=0.0, le=180.0)
    workers: int = Field(default_factory=_default_workers, ge=1)
    compress: bool = False
    # None: the default of the dataset variant
    merge_fragments: Optional[bool] = None

    @model_validator(mode="before")
    @classmethod
    def apply_profile(cls, data: Any) -> Any:
        if not isinstance(data, dict) or data.get("profile") is None:
            return data
        profile_epsilon = SIMPLIFICATION_PROFILES.get(data["profile"])
        if profile_epsilon is None:
            # rejected by the field validation
            return data
        if "epsilon" in data and data["epsilon"] != profile_epsilon:
            raise ValueError(
                f"epsilon {data['epsilon']} contradicts the simplification profile {data['profile']!r}"
            )
        return {**data, "epsilon": profile_epsilon}

    @field_validator("cell_size")
    @classmethod
    def validate_grid(cls, value: float) -> float:
        # raises ValueError for too many grid cells
        grid_shape(value)
        return value

    @property
    def should_merge_fragments(self) -> bool:
        if self.merge_fragments is None:
            return MERGE_FRAGMENTS_DEFAULT[self.dataset]
        return self.merge_fragments

    @property
    def feature_model(self) -> Type[Feature]:
        return FEATURE_MODELS[self.dataset]
