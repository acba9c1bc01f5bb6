"""Offline-first store shared by tasks and goals."""
import logging

import requests

from focusboard.client.api_client import ApiError
from focusboard.client.reconcile import merge_collection, next_local_id
from focusboard.client.records import SyncState
from focusboard.client.sync_queue import SyncQueue
from focusboard.domain import utc_now


logger = logging.getLogger(__name__)

SYNC_ERRORS = (ApiError, requests.RequestException)


class SyncedCollectionStore:
    """
    Local list of records mirrored to a per-user server collection.

    Every mutation lands locally first and is cached; the server write is a
    single best-effort attempt. Failed or offline writes wait in
    ``sync_queue`` (and deletes of server rows in ``pending_deletes``) until
    ``process_sync_queue`` drains them.
    """

    record_type = None
    cache_key = None
    resource = None

    def __init__(self, api, cache, session, clock=utc_now):
        self.api = api
        self.cache = cache
        self.session = session
        self.clock = clock
        self.records = []
        self.next_id = 1
        self.sync_queue = SyncQueue()
        self.pending_deletes = SyncQueue()
        self.initialized = False

    # remote hooks
    def _list_remote(self):
        raise NotImplementedError

    def _create_remote(self, record):
        raise NotImplementedError

    def _update_remote(self, record):
        raise NotImplementedError

    def _delete_remote(self, local_id):
        raise NotImplementedError

    def get(self, local_id):
        for record in self.records:
            if record.local_id == local_id:
                return record
        return None

    @property
    def unsynced(self):
        return [record for record in self.records if not record.synced]

    def initialize(self):
        self.load_from_cache()
        if self.session.logged_in:
            self.fetch_from_server()
        self.initialized = True

    def load_from_cache(self):
        data = self.cache.load(self.cache_key)
        if not data:
            return
        self.records = [self.record_type.from_cache(item) for item in data.get("records", [])]
        self.sync_queue.load(data.get("sync_queue"))
        self.pending_deletes.load(data.get("pending_deletes"))
        self.next_id = max(
            int(data.get("next_id") or 1),
            next_local_id(self.records, self.pending_deletes.keys()),
        )

    def persist_to_cache(self):
        self.cache.save(
            self.cache_key,
            {
                "records": [record.to_cache() for record in self.records],
                "next_id": self.next_id,
                "sync_queue": self.sync_queue.to_cache(),
                "pending_deletes": self.pending_deletes.to_cache(),
            },
        )

    def clear_cache(self):
        self.cache.remove(self.cache_key)

    def _allocate_id(self):
        local_id = self.next_id
        self.next_id += 1
        return local_id

    def _insert(self, record):
        self.records.append(record)
        self.persist_to_cache()
        self.sync_record(record)
        return record

    def _modify(self, local_id, **changes):
        record = self.get(local_id)
        if record is None:
            return None
        for name, value in changes.items():
            setattr(record, name, value)
        record.sync_state = SyncState.PENDING
        self.persist_to_cache()
        self.sync_record(record)
        return record

    def _remove(self, local_id):
        record = self.get(local_id)
        if record is None:
            return False
        self.records = [item for item in self.records if item.local_id != local_id]
        self.sync_queue.discard(local_id)
        self.persist_to_cache()
        # rows the server never stored need no delete call
        if record.server_id is not None:
            self.delete_on_server(local_id)
        return True

    def _write_remote(self, record):
        if record.server_id is not None:
            try:
                return self._update_remote(record)
            except ApiError as exc:
                if exc.status_code != 404:
                    raise
                logger.info(
                    "%s missing on server, re-creating", self.resource,
                    extra={"local_id": record.local_id},
                )
        try:
            return self._create_remote(record)
        except ApiError as exc:
            if exc.status_code != 409:
                raise
            return self._update_remote(record)

    def sync_record(self, record, entry=None, now=None):
        """Push one record; on failure queue it for retry. Returns True on success."""
        if not self.session.logged_in:
            self.sync_queue.push(record.local_id)
            self.persist_to_cache()
            return False
        try:
            server_id = self._write_remote(record)
        except SYNC_ERRORS as exc:
            now = now or self.clock()
            record.sync_state = SyncState.FAILED
            if entry is not None:
                self.sync_queue.retry(entry, now)
            else:
                self.sync_queue.push(record.local_id, now)
            logger.warning(
                "%s sync failed", self.resource,
                extra={"local_id": record.local_id, "error": str(exc)},
            )
            self.persist_to_cache()
            return False
        if server_id is not None:
            record.server_id = server_id
        record.sync_state = SyncState.SYNCED
        self.sync_queue.discard(record.local_id)
        self.persist_to_cache()
        return True

    def delete_on_server(self, local_id, entry=None, now=None):
        if not self.session.logged_in:
            self.pending_deletes.push(local_id)
            self.persist_to_cache()
            return False
        try:
            self._delete_remote(local_id)
        except SYNC_ERRORS as exc:
            if isinstance(exc, ApiError) and exc.status_code == 404:
                return True
            now = now or self.clock()
            if entry is not None:
                self.pending_deletes.retry(entry, now)
            else:
                self.pending_deletes.push(local_id, now)
            logger.warning(
                "%s delete failed", self.resource,
                extra={"local_id": local_id, "error": str(exc)},
            )
            self.persist_to_cache()
            return False
        self.pending_deletes.discard(local_id)
        self.persist_to_cache()
        return True

    def process_sync_queue(self, now=None):
        """
        Retry queued writes. With ``now`` only entries whose backoff has
        elapsed are attempted; without it every entry is.
        """
        if not self.session.logged_in:
            return 0
        synced = 0
        for entry in self.pending_deletes.drain(now):
            if self.delete_on_server(entry.key, entry=entry, now=now):
                synced += 1
        for entry in self.sync_queue.drain(now):
            record = self.get(entry.key)
            if record is None or record.synced:
                continue
            if self.sync_record(record, entry=entry, now=now):
                synced += 1
        if synced:
            logger.info("%s queue processed", self.resource, extra={"synced": synced})
        return synced

    def fetch_from_server(self):
        if not self.session.logged_in:
            return False
        try:
            items = self._list_remote()
        except SYNC_ERRORS as exc:
            logger.warning("%s fetch failed", self.resource, extra={"error": str(exc)})
            return False

        server_records = [self.record_type.from_server(item) for item in items]
        merged, carried, rekeyed = merge_collection(server_records, self.records)
        for old_id, new_id in rekeyed.items():
            self.sync_queue.rename(old_id, new_id)
        for record in carried:
            self.sync_queue.push(record.local_id)
        self.records = merged
        self.next_id = next_local_id(self.records, self.pending_deletes.keys())

        if carried or len(self.pending_deletes):
            self.persist_to_cache()
        else:
            self.clear_cache()
        logger.info(
            "%s fetched", self.resource,
            extra={"server": len(server_records), "unsynced": len(carried)},
        )
        return True
