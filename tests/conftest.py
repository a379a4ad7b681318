import pytest

from trip_planner_app.services.calendar_service import clear_calendar_cache
from trip_planner_app.services.database_service import DatabaseService


@pytest.fixture
def db_service(tmp_path):
    return DatabaseService(db_path=str(tmp_path / "data" / "test.db"))


@pytest.fixture(autouse=True)
def _fresh_calendar_cache():
    clear_calendar_cache()
    yield
    clear_calendar_cache()
