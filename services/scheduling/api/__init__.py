from services.scheduling.api.calendar import router as calendar_router  # noqa: F401
from services.scheduling.api.employees import router as employees_router  # noqa: F401
