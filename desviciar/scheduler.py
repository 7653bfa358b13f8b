"""Background scheduler for periodic tasks"""
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from desviciar.config import settings
import logging

logger = logging.getLogger(__name__)
scheduler = AsyncIOScheduler()


def start_scheduler():
    """Start the background scheduler"""
    try:
        scheduler.start()
        logger.info("✅ Scheduler started successfully")
    except Exception as e:
        logger.error(f"❌ Failed to start scheduler: {e}")


def stop_scheduler():
    """Stop the background scheduler"""
    try:
        scheduler.shutdown()
        logger.info("✅ Scheduler stopped successfully")
    except Exception as e:
        logger.error(f"❌ Failed to stop scheduler: {e}")


@scheduler.scheduled_job('cron', hour=settings.INACTIVITY_CHECK_HOUR, minute=0)
async def notify_inactive_users():
    """
    Remind users who have not opened the app in the last day
    Runs daily at INACTIVITY_CHECK_HOUR (noon by default)
    """
    try:
        from desviciar.core.firebase import get_firebase
        from desviciar.services.fcm_service import FCMService

        logger.info("🔔 Checking for inactive users")

        report = FCMService(get_firebase()).notify_inactive_users()

        logger.info(f"✅ Inactivity reminders sent: {report.sent}")

    except Exception as e:
        logger.error(f"❌ Error during inactivity check: {e}")
