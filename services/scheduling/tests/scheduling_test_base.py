"""
Base classes for Scheduling Service tests.

Provides common setup and teardown for the service tests, including test
settings, a throwaway SQLite database and an app instance wired like
``services.scheduling.main``.
"""

import os
import tempfile
from datetime import datetime
from typing import Any, Dict, Iterable, Optional

from fastapi import FastAPI

from services.common.http_errors import register_exception_handlers
from services.common.logging_config import create_request_logging_middleware
from services.common.test_utils import BaseSelectiveHTTPIntegrationTest

# Monday; the free-slot window runs 2024-01-15 09:00 -> 2024-01-22 17:00
FIXED_NOW = datetime(2024, 1, 15, 13, 27, 45)


class BaseSchedulingTest(BaseSelectiveHTTPIntegrationTest):
    """Base class for Scheduling Service tests with HTTP call prevention."""

    def settings_overrides(self) -> Dict[str, Any]:
        return {}

    def setup_method(self, method):
        super().setup_method(method)

        from services.scheduling.models import reset_db

        reset_db()

        # Use a unique temp file for each test
        self._db_fd, self._db_path = tempfile.mkstemp(suffix=".sqlite3")
        db_url = f"sqlite:///{self._db_path}"

        import services.scheduling.settings as scheduling_settings
        from services.scheduling.settings import Settings

        self._original_settings = scheduling_settings._settings
        scheduling_settings._settings = Settings(
            db_url_scheduling=db_url,
            log_level="INFO",
            log_format="json",
            **self.settings_overrides(),
        )

        from services.scheduling.models import create_all_tables_for_testing

        create_all_tables_for_testing()

        from services.scheduling.api.calendar import get_clock
        from services.scheduling.main import include_routers

        # A fresh app so dependency overrides do not leak between tests
        self.app = FastAPI(title="Scheduling Service Test", version="0.1.0")
        self.app.middleware("http")(create_request_logging_middleware())
        register_exception_handlers(self.app)
        include_routers(self.app)
        self.app.dependency_overrides[get_clock] = lambda: (lambda: FIXED_NOW)

        self.client = self.create_test_client(self.app, raise_server_exceptions=False)

    def teardown_method(self, method):
        from services.scheduling.models import close_db

        close_db()

        import services.scheduling.settings as scheduling_settings

        scheduling_settings._settings = self._original_settings

        if hasattr(self, "_db_fd"):
            os.close(self._db_fd)
        if hasattr(self, "_db_path") and os.path.exists(self._db_path):
            os.unlink(self._db_path)

        super().teardown_method(method)

    def add_employee(self, name: str) -> int:
        from services.scheduling.models import Employee, get_session

        with get_session() as session:
            employee = Employee(name=name)
            session.add(employee)
            session.flush()
            return employee.id

    def add_meeting(
        self,
        owner_id: int,
        start: datetime,
        end: datetime,
        participant_ids: Iterable[int] = (),
        title: Optional[str] = "Existing meeting",
    ) -> int:
        from services.scheduling.models import Employee, Meeting, get_session

        with get_session() as session:
            meeting = Meeting(
                title=title, start_time=start, end_time=end, owner_id=owner_id
            )
            meeting.participants = [
                session.get(Employee, participant_id)
                for participant_id in participant_ids
            ]
            session.add(meeting)
            session.flush()
            return meeting.id
