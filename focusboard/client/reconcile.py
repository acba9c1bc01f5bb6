"""Merging pulled server state with records the client has not confirmed yet."""
import logging

from focusboard.client.records import SyncState


logger = logging.getLogger(__name__)


def next_local_id(records, reserved=()):
    """One past the highest id in use, counting ids reserved by pending deletes."""
    ids = [record.local_id for record in records]
    ids.extend(reserved)
    return max(ids, default=0) + 1


def merge_collection(server_records, local_records):
    """
    Server records replace the local collection; unsynced local records are
    carried over.

    Returns ``(merged, carried, rekeyed)`` where ``carried`` lists the local
    records that still need a server write and ``rekeyed`` maps old local ids
    to the fresh ids given to records whose id collided with a different
    server record.
    """
    merged = list(server_records)
    index_by_id = {record.local_id: index for index, record in enumerate(merged)}
    carried = []
    collided = []

    for record in local_records:
        if record.sync_state is SyncState.SYNCED:
            continue
        index = index_by_id.get(record.local_id)
        if index is None:
            if record.server_id is not None:
                # row deleted elsewhere; the pending local edit re-creates it
                record.server_id = None
            merged.append(record)
            carried.append(record)
            continue

        server_record = merged[index]
        same_row = record.server_id is not None and record.server_id == server_record.server_id
        adopted = record.server_id is None and record.title == server_record.title
        if same_row or adopted:
            record.server_id = server_record.server_id
            merged[index] = record
            carried.append(record)
        else:
            collided.append(record)

    rekeyed = {}
    next_id = next_local_id(merged + collided)
    for record in collided:
        rekeyed[record.local_id] = next_id
        logger.info(
            "local record re-keyed after id collision",
            extra={"old_id": record.local_id, "new_id": next_id},
        )
        record.local_id = next_id
        next_id += 1
        merged.append(record)
        carried.append(record)

    return merged, carried, rekeyed


def merge_session_history(server_sessions, local_sessions):
    """
    Server history replaces local history; unsynced local sessions are
    appended back, keyed by their date string only. Two distinct unsynced
    sessions sharing a timestamp collapse into one, and an unsynced session
    the server already stored appears twice.
    """
    unsynced = {}
    for session in local_sessions:
        if session.sync_state is not SyncState.SYNCED:
            unsynced[session.date] = session
    return list(server_sessions) + list(unsynced.values())


def cap_history(sessions, limit):
    """Trim a newest-first history to ``limit`` by dropping the oldest synced entries."""
    sessions = list(sessions)
    index = len(sessions) - 1
    while len(sessions) > limit and index >= 0:
        if sessions[index].sync_state is SyncState.SYNCED:
            del sessions[index]
        index -= 1
    return sessions
