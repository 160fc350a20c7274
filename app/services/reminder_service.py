"""
Simulated RSVP reminder e-mails.

Nothing is actually delivered: each reminder is written to the log and
recorded in the ``email_logs`` table.
"""

import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional

from app.core.config import settings
from app.core.exceptions import ReminderError
from app.services.batch_inserter import BatchInserter, chunked
from app.services.dev_state import DevStateStore
from app.services.record_store import RecordStore

logger = logging.getLogger(__name__)

RSVP_REMINDER = "rsvp_reminder"


class ReminderService:
    """Sends (simulated) reminders to pending guests"""

    def __init__(self, store: RecordStore, dev_state: DevStateStore):
        self.store = store
        self.dev_state = dev_state

    async def send_rsvp_reminders(self, user_id: str, guest_ids: List[str]) -> int:
        if not guest_ids:
            raise ReminderError("No guests selected for reminders")

        await self.dev_state.simulate_network_delay()
        pending = [
            g for g in self.store.select(
                "guests", {"user_id": user_id, "rsvp_status": "pending", "id": list(guest_ids)}
            )
            if g.get("email")
        ]
        if not pending:
            logger.info(f"No pending guests with email addresses found for user {user_id}")
            return 0

        sent_at = datetime.now(timezone.utc)
        logs = []
        for guest in pending:
            logger.info(f"Sending reminder email to {guest['name']} at {guest['email']}")
            logs.append({
                "guest_id": str(guest["id"]),
                "email": guest["email"],
                "email_type": RSVP_REMINDER,
                "status": "sent",
                "sent_at": sent_at,
                "user_id": user_id,
            })

        inserter = BatchInserter(self.store, self.dev_state)
        await inserter.insert_batches(
            "email_logs",
            chunked(logs, settings.EMAIL_LOG_BATCH_SIZE),
            total=len(logs),
            label="email logs",
        )
        logger.info(f"Successfully sent reminders to {len(logs)} guests")
        return len(logs)

    def get_email_logs(self, user_id: str, guest_id: Optional[str] = None) -> List[Dict]:
        filters = {"user_id": user_id}
        if guest_id:
            filters["guest_id"] = guest_id
        return self.store.select("email_logs", filters, order_by="-sent_at")
