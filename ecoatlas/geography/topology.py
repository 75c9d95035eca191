"""Decode world-atlas TopoJSON into country features.

Only what the data layer needs is extracted: the ISO numeric id used to join
against the SPARQL tables, the country name, and a planar centroid used by
the continent rules. Drawing the shapes is left to the rendering layer.
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import BaseModel

from ecoatlas.settings import get_settings
from ecoatlas.utils import parse_int_key

logger = logging.getLogger(__name__)

Point = tuple[float, float]


class CountryFeature(BaseModel):
    id: str | None = None
    name: str = ""
    centroid: tuple[float, float] | None = None

    @property
    def iso_num(self) -> int | None:
        return parse_int_key(self.id)


def fetch_topology(url: str | None = None, timeout: float = 30.0) -> dict[str, Any]:
    """Download the boundary topology (world-atlas ``countries-110m.json``)."""
    url = url or get_settings().topology_url
    try:
        resp = httpx.get(url, timeout=timeout)
        resp.raise_for_status()
        return resp.json()
    except (httpx.HTTPStatusError, httpx.RequestError, ValueError) as exc:
        logger.error("Failed to load topology from %s: %s", url, exc)
        raise ConnectionError(f"Failed to load topology from {url}") from exc


def decode_arcs(topology: dict[str, Any]) -> list[list[Point]]:
    """Absolute coordinates for every arc, undoing delta and quantization."""
    transform = topology.get("transform")
    arcs: list[list[Point]] = []
    for arc in topology.get("arcs", []):
        if transform:
            sx, sy = transform["scale"]
            tx, ty = transform["translate"]
            x = y = 0
            points = []
            for dx, dy, *_ in arc:
                x += dx
                y += dy
                points.append((x * sx + tx, y * sy + ty))
        else:
            points = [(float(p[0]), float(p[1])) for p in arc]
        arcs.append(points)
    return arcs


def _ring(indices: list[int], arcs: list[list[Point]]) -> list[Point]:
    coords: list[Point] = []
    for index in indices:
        # Negative indices are one's complement references to reversed arcs
        arc = arcs[~index][::-1] if index < 0 else arcs[index]
        coords.extend(arc[1:] if coords else arc)
    return coords


def _exterior_rings(geometry: dict[str, Any], arcs: list[list[Point]]) -> list[list[Point]]:
    kind = geometry.get("type")
    refs = geometry.get("arcs") or []
    if kind == "Polygon":
        polygons = [refs]
    elif kind == "MultiPolygon":
        polygons = refs
    else:
        return []
    return [_ring(polygon[0], arcs) for polygon in polygons if polygon]


def planar_centroid(rings: list[list[Point]]) -> Point | None:
    """Area-weighted centroid of the given rings (shoelace formula)."""
    area_sum = cx = cy = 0.0
    points: list[Point] = []
    for ring in rings:
        points.extend(ring)
        for (x0, y0), (x1, y1) in zip(ring, ring[1:]):
            cross = x0 * y1 - x1 * y0
            area_sum += cross
            cx += (x0 + x1) * cross
            cy += (y0 + y1) * cross
    if area_sum:
        return (cx / (3 * area_sum), cy / (3 * area_sum))
    if points:
        return (
            sum(p[0] for p in points) / len(points),
            sum(p[1] for p in points) / len(points),
        )
    return None


def decode_countries(
    topology: dict[str, Any], object_name: str = "countries"
) -> list[CountryFeature]:
    """Country features from one named object of the topology."""
    obj = (topology.get("objects") or {}).get(object_name)
    if not obj:
        raise KeyError(f"Topology has no object named {object_name!r}")
    arcs = decode_arcs(topology)

    features: list[CountryFeature] = []
    for geometry in obj.get("geometries", []):
        props = geometry.get("properties") or {}
        raw_id = geometry.get("id")
        features.append(CountryFeature(
            id=str(raw_id) if raw_id is not None else None,
            name=props.get("name", ""),
            centroid=planar_centroid(_exterior_rings(geometry, arcs)),
        ))
    logger.info("Decoded %d country features", len(features))
    return features
