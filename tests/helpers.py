from datetime import date

from navwarn_s124.geojson import Feature, FeatureCollection

TODAY = date(2024, 6, 1)

SQUARE = [(10.5, 55.5), (11.0, 55.5), (11.0, 56.0), (10.5, 56.0), (10.5, 55.5)]


def collection(*geometries):
    return FeatureCollection([Feature(g) for g in geometries])
