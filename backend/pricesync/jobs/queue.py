from __future__ import annotations

import logging

from redis import Redis
from rq import Queue
from rq.job import Job

from pricesync.config.settings import settings
from pricesync.jobs.price_sync import run_price_sync
from pricesync.records.store import ChangeEvent, RecordStore, Subscription

logger = logging.getLogger(__name__)


def get_redis_connection() -> Redis:
    return Redis.from_url(settings.redis_url)


def get_queue(name: str | None = None) -> Queue:
    queue_name = name or settings.price_sync_queue_name
    return Queue(name=queue_name, connection=get_redis_connection())


def enqueue_price_sync(investments: list[dict]) -> Job:
    queue = get_queue()
    return queue.enqueue(run_price_sync, investments=investments)


def watch_for_resync(store: RecordStore, user_id: str) -> Subscription:
    """Enqueue a price sync of ``user_id``'s records whenever one of them changes."""

    def on_change(event: ChangeEvent) -> None:
        if event.user_id != user_id:
            return
        records = store.list_for_user(user_id)
        investments = [record.model_dump(mode="json") for record in records]
        job = enqueue_price_sync(investments)
        logger.info(
            "Queued price sync job %s for user %s after %s of %s",
            job.id,
            user_id,
            event.kind,
            event.record_id,
        )

    return store.subscribe(on_change)
