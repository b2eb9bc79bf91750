# book_rental/tasks/scheduler.py
from __future__ import annotations

import atexit
import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger


def start_scheduler(app):
    """
    Runs the overdue reminder job on an interval.
    - Disabled unless SCHEDULER_ENABLED is set.
    - Skips the Werkzeug reloader's secondary process in debug mode.
    - Shuts the scheduler down at interpreter exit.
    """
    if not app.config.get("SCHEDULER_ENABLED"):
        app.logger.info("[scheduler] disabled (SCHEDULER_ENABLED=0).")
        return None

    # the reloader spawns two processes; WERKZEUG_RUN_MAIN=true marks the real one
    if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        app.logger.info("[scheduler] debug reloader secondary process: scheduler skipped.")
        return None

    from book_rental.tasks.overdue_check import run_overdue_check_job

    minutes = int(app.config.get("OVERDUE_CHECK_INTERVAL_MINUTES", 60))
    scheduler = BackgroundScheduler(timezone="UTC")

    def _job_wrapper():
        try:
            run_overdue_check_job(app)
        except Exception as ex:
            app.logger.exception(f"[scheduler] overdue_check_job error: {ex}")

    scheduler.add_job(
        func=_job_wrapper,
        trigger=IntervalTrigger(minutes=minutes),
        id="overdue_check_job",
        replace_existing=True,
        max_instances=1,        # never overlap
        coalesce=True,          # collapse missed runs into one
        misfire_grace_time=120
    )

    scheduler.start()
    app.logger.info(f"[scheduler] overdue check job started (every {minutes} minutes).")

    app.extensions["apscheduler"] = scheduler
    atexit.register(_shutdown_scheduler, scheduler)

    return scheduler


def _shutdown_scheduler(scheduler):
    if scheduler.running:
        scheduler.shutdown(wait=False)
