import logging

from fastapi import FastAPI

from slotplanner.api.v1.slots import router as slots_router
from slotplanner.core.config import settings

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("date", "slot", "duration", "booked", "blocks", "reason", "capacity", "solver", "recommended", "skipped", "error"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title=f"{settings.BUSINESS_NAME} Slot Planner", version="1.0.0")

app.include_router(slots_router, prefix="/api/v1/slots", tags=["slots"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}
