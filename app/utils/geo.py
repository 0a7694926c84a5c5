"""
Helpers géographiques : conversion EXIF GPS, construction et test de polygones.

Convention : les coordonnées sont en ordre GeoJSON (longitude, latitude).
"""

from typing import Any, Mapping, Sequence, Tuple

from shapely.geometry import Point, Polygon, box

# Tags du GPS IFD (EXIF)
GPS_LATITUDE_REF = 1
GPS_LATITUDE = 2
GPS_LONGITUDE_REF = 3
GPS_LONGITUDE = 4


def dms_to_degrees(dms: Sequence[Any]) -> float:
    """(degrés, minutes, secondes) -> degrés décimaux."""
    degrees, minutes, seconds = (float(v) for v in dms)
    return degrees + minutes / 60.0 + seconds / 3600.0


def coords_from_gps_ifd(gps: Mapping[int, Any]) -> Tuple[float, float] | None:
    """Retourne (longitude, latitude) ou None si les tags sont incomplets."""
    try:
        lat = dms_to_degrees(gps[GPS_LATITUDE])
        lng = dms_to_degrees(gps[GPS_LONGITUDE])
    except (KeyError, TypeError, ValueError, ZeroDivisionError):
        return None
    if str(gps.get(GPS_LATITUDE_REF, "N")).upper().startswith("S"):
        lat = -lat
    if str(gps.get(GPS_LONGITUDE_REF, "E")).upper().startswith("W"):
        lng = -lng
    return lng, lat


def parse_lat_lng(raw: str) -> Tuple[float, float]:
    """
    "60.2,24.9" -> (lng, lat).
    Lève ValueError si le format ou les bornes sont invalides.
    """
    parts = [p.strip() for p in (raw or "").split(",")]
    if len(parts) != 2:
        raise ValueError("expected 'lat,lng'")
    lat, lng = float(parts[0]), float(parts[1])
    validate_point(lng, lat)
    return lng, lat


def validate_point(lng: float, lat: float) -> None:
    if not -90.0 <= lat <= 90.0:
        raise ValueError("latitude must be between -90 and 90")
    if not -180.0 <= lng <= 180.0:
        raise ValueError("longitude must be between -180 and 180")


def bounding_box(top_right: Tuple[float, float], bottom_left: Tuple[float, float]) -> Polygon:
    """
    Polygone fermé (anneau anti-horaire) à partir de deux coins (lng, lat).
    Les coins peuvent être donnés dans le désordre.
    """
    (x1, y1), (x2, y2) = top_right, bottom_left
    return box(min(x1, x2), min(y1, y2), max(x1, x2), max(y1, y2), ccw=True)


def point_in_polygon(polygon: Polygon, lng: float, lat: float) -> bool:
    """Vrai si le point est dans le polygone ou sur son bord."""
    return polygon.covers(Point(lng, lat))
