from __future__ import annotations

from typing import Optional, Tuple

from nicegui import ui

from livemap.config import settings


class MapComponent:
    """
    Карта Leaflet с тайлами OpenStreetMap.
    Реализует MapView для MapRenderer.
    """

    def __init__(
        self,
        center: Tuple[float, float] | None = None,
        zoom: int | None = None,
    ) -> None:
        self.center = center or (settings.map.DEFAULT_LAT, settings.map.DEFAULT_LON)
        self.zoom = zoom if zoom is not None else settings.map.DEFAULT_ZOOM
        self.map_element: Optional[ui.leaflet] = None

    def render(self) -> ui.leaflet:
        """Рендерит карту на весь экран."""
        # ui.leaflet по умолчанию использует тайлы OpenStreetMap
        self.map_element = ui.leaflet(center=self.center, zoom=self.zoom).classes(
            'w-full h-screen absolute top-0 left-0 z-0'
        )
        return self.map_element

    def _map(self) -> ui.leaflet:
        if self.map_element is None:
            raise RuntimeError("Map is not rendered")
        return self.map_element

    def set_view(self, latitude: float, longitude: float) -> None:
        self._map().set_center((latitude, longitude))

    def add_marker(self, latitude: float, longitude: float):
        return self._map().marker(latlng=(latitude, longitude))

    def move_marker(self, marker, latitude: float, longitude: float) -> None:
        marker.move(latitude, longitude)

    def remove_marker(self, marker) -> None:
        self._map().remove_layer(marker)
