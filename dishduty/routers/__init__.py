from dishduty.routers.dishduty import router as dishduty_router
from dishduty.routers.cron import router as cron_router

__all__ = ["dishduty_router", "cron_router"]
