"""
Redis-backed job queue.

Layout (all keys under ``bull-lite:{name}:``):

* ``job:{id}``   – JSON job record, created with ``SET NX`` so that a
  duplicate id collapses into the existing job
* ``wait``       – list of runnable job ids (LPUSH in, RIGHT out)
* ``active``     – list of reserved ids; ``LMOVE`` makes the hand-off atomic
* ``delayed``    – sorted set of ids scored by the time they become runnable
* ``completed``  – list of finished ids, in completion order
* ``failed``     – set of ids that exhausted their attempts
* ``paused``     – present while the queue is paused

Several worker processes may share one queue; job state survives a crash
of any of them.
"""

import dataclasses
import functools
import json
import time
from typing import Any

import redis

from domain_crawler.config import DEFAULT_REDIS_URL, QUEUE_KEY_PREFIX, QUEUE_NAME
from domain_crawler.errors import QueueBusyError, QueueError
from domain_crawler.queue.base import Job, JobCounts, JobOptions, JobQueue
from domain_crawler.utils.log import log


def _redis_errors(method):
    """Re-raise ``redis.RedisError`` from *method* as :class:`QueueError`."""

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except redis.RedisError as exc:
            raise QueueError(f"Redis error on queue '{self.name}': {exc}") from exc

    return wrapper


class RedisQueue(JobQueue):

    def __init__(
        self,
        name: str = QUEUE_NAME,
        url: str = DEFAULT_REDIS_URL,
        client: "redis.Redis | None" = None,
    ) -> None:
        self.name = name
        self._redis = client if client is not None else redis.Redis.from_url(
            url, decode_responses=True
        )
        self._prefix = f"{QUEUE_KEY_PREFIX}:{name}"

    def _key(self, name: str) -> str:
        return f"{self._prefix}:{name}"

    def _job_key(self, job_id: str) -> str:
        return self._key(f"job:{job_id}")

    @staticmethod
    def _encode(job: Job) -> str:
        return json.dumps(dataclasses.asdict(job), ensure_ascii=False)

    @staticmethod
    def _decode(raw: str) -> Job:
        return Job(**json.loads(raw))

    # ------------------------------------------------------------------
    # Producer side
    # ------------------------------------------------------------------

    @_redis_errors
    def add(self, name: str, data: dict[str, Any], options: JobOptions) -> bool:
        job = Job.from_options(name, data, options)
        if not self._redis.set(self._job_key(job.id), self._encode(job), nx=True):
            return False
        self._redis.lpush(self._key("wait"), job.id)
        return True

    @_redis_errors
    def pause(self) -> None:
        self._redis.set(self._key("paused"), "1")

    @_redis_errors
    def resume(self) -> None:
        self._redis.delete(self._key("paused"))

    @_redis_errors
    def is_paused(self) -> bool:
        return bool(self._redis.exists(self._key("paused")))

    @_redis_errors
    def obliterate(self) -> None:
        active = self._redis.llen(self._key("active"))
        if active:
            raise QueueBusyError(
                f"Cannot obliterate queue '{self.name}': {active} job(s) are active"
            )
        keys = list(self._redis.scan_iter(match=f"{self._prefix}:*", count=500))
        for i in range(0, len(keys), 500):
            self._redis.delete(*keys[i:i + 500])
        log.debug("[QUEUE] Obliterated %d key(s) of Redis queue '%s'", len(keys), self.name)

    @_redis_errors
    def counts(self) -> JobCounts:
        pipe = self._redis.pipeline()
        pipe.llen(self._key("active"))
        pipe.llen(self._key("wait"))
        pipe.zcard(self._key("delayed"))
        pipe.llen(self._key("completed"))
        pipe.scard(self._key("failed"))
        active, waiting, delayed, completed, failed = pipe.execute()
        return JobCounts(
            active=active,
            waiting=waiting,
            delayed=delayed,
            completed=completed,
            failed=failed,
        )

    # ------------------------------------------------------------------
    # Consumer side
    # ------------------------------------------------------------------

    @_redis_errors
    def reserve(self) -> Job | None:
        if self._redis.exists(self._key("paused")):
            return None
        self._promote_delayed()
        job_id = self._redis.lmove(self._key("wait"), self._key("active"), "RIGHT", "LEFT")
        if job_id is None:
            return None
        raw = self._redis.get(self._job_key(job_id))
        if raw is None:
            # Record vanished between enqueue and reservation.
            self._redis.lrem(self._key("active"), 1, job_id)
            log.warning("[QUEUE] Job %s has no record – dropped", job_id)
            return None
        return self._decode(raw)

    @_redis_errors
    def complete(self, job: Job) -> None:
        pipe = self._redis.pipeline()
        pipe.lrem(self._key("active"), 1, job.id)
        if job.remove_on_complete:
            pipe.delete(self._job_key(job.id))
        else:
            pipe.rpush(self._key("completed"), job.id)
        pipe.execute()

    @_redis_errors
    def fail(self, job: Job, exc: BaseException) -> None:
        # *job* is only updated once the pipeline went through, so a
        # retried call after a connection error counts the attempt once.
        failed = dataclasses.replace(
            job, attempts_made=job.attempts_made + 1, failed_reason=str(exc)
        )
        pipe = self._redis.pipeline()
        pipe.lrem(self._key("active"), 1, failed.id)
        if failed.can_retry:
            pipe.set(self._job_key(failed.id), self._encode(failed))
            pipe.zadd(self._key("delayed"), {failed.id: time.time() + failed.retry_delay()})
        elif failed.remove_on_fail:
            pipe.delete(self._job_key(failed.id))
        else:
            pipe.set(self._job_key(failed.id), self._encode(failed))
            pipe.sadd(self._key("failed"), failed.id)
        pipe.execute()
        job.attempts_made = failed.attempts_made
        job.failed_reason = failed.failed_reason

    @_redis_errors
    def completed_ids(self) -> list[str]:
        return list(self._redis.lrange(self._key("completed"), 0, -1))

    @_redis_errors
    def close(self) -> None:
        self._redis.close()

    def _promote_delayed(self) -> None:
        delayed = self._key("delayed")
        wait = self._key("wait")

        def promote(pipe) -> None:
            due = pipe.zrangebyscore(delayed, "-inf", time.time())
            if not due:
                return
            # ZREM and LPUSH commit together; a competing promoter touching
            # the delayed set aborts this attempt and it is retried.
            pipe.multi()
            pipe.zrem(delayed, *due)
            pipe.lpush(wait, *due)

        self._redis.transaction(promote, delayed)
