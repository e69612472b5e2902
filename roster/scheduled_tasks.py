"""
Scheduled background tasks for the Student Roster API.

Contains periodic tasks that run in the background to maintain process state.
"""

import logging

from roster.admission import get_registration_ledger


def sweep_registration_ledger_job(app):
    """
    Drop registration attempts older than the cooldown window.

    Runs once per cooldown window so the ledger stays bounded by the number
    of distinct attempts seen in roughly the last two windows.
    """
    logger = logging.getLogger('scheduled_tasks')
    try:
        removed = get_registration_ledger(app).sweep()
        if removed:
            logger.info(f"Registration ledger sweep removed {removed} stale entries")
    except Exception as e:
        logger.error(f"Registration ledger sweep failed: {e}", exc_info=True)


def init_scheduled_tasks(app):
    """
    Initialize and start scheduled tasks.

    Args:
        app: Flask application instance
    """
    from roster.extensions import scheduler

    logger = logging.getLogger('scheduled_tasks')
    interval = get_registration_ledger(app).cooldown_seconds

    if not scheduler.running:
        scheduler.add_job(
            func=sweep_registration_ledger_job,
            args=[app],
            trigger='interval',
            seconds=interval,
            id='sweep_registration_ledger',
            name='Sweep stale registration attempts',
            replace_existing=True,
            max_instances=1  # Prevent overlapping executions
        )

        scheduler.start()
        logger.info(f"Scheduled tasks initialized. Registration ledger sweep runs every {interval}s.")
    else:
        logger.info("Scheduler already running")
