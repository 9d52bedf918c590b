from .screens import build_station_view
from .station_view import WeighingStationView

__all__ = ["WeighingStationView", "build_station_view"]
