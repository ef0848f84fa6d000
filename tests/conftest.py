from pathlib import Path
import pytest

from mountainsnail.analyze.track import Segment, Track, Waypoint


@pytest.fixture
def sample_gpx_path() -> Path:
    return Path(__file__).parent / "data" / "sample.gpx"


@pytest.fixture
def climb_track() -> Track:
    """Three points heading north: 100 m up, then 40 m down."""
    return Track(
        name="climb",
        segments=[Segment(points=[
            Waypoint(lat=45.0000, lon=6.0, ele=1000.0),
            Waypoint(lat=45.0090, lon=6.0, ele=1100.0),
            Waypoint(lat=45.0180, lon=6.0, ele=1060.0),
        ])],
    )
