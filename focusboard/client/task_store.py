from focusboard.client.collection_store import SyncedCollectionStore
from focusboard.client.records import Task


class TaskStore(SyncedCollectionStore):
    record_type = Task
    cache_key = "tasks"
    resource = "task"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.hide_completed = False
        # called with the store after a task flips to completed
        self.on_task_completed = []

    def _list_remote(self):
        return self.api.list_tasks()

    def _create_remote(self, record):
        return self.api.create_task(record.to_payload())

    def _update_remote(self, record):
        return self.api.update_task(record.local_id, record.to_payload())

    def _delete_remote(self, local_id):
        self.api.delete_task(local_id)

    @property
    def tasks(self):
        return self.records

    @property
    def visible_tasks(self):
        if self.hide_completed:
            return [task for task in self.records if not task.completed]
        return list(self.records)

    def add_task(self, title, description="", date=None, time=None):
        title = (title or "").strip()
        if not title:
            return None
        task = Task(
            local_id=self._allocate_id(),
            title=title,
            description=description or "",
            date=date,
            time=time,
        )
        return self._insert(task)

    def update_task(self, local_id, **changes):
        if "title" in changes:
            title = (changes["title"] or "").strip()
            if not title:
                return None
            changes["title"] = title
        return self._modify(local_id, **changes)

    def toggle_complete(self, local_id):
        task = self.get(local_id)
        if task is None:
            return None
        task = self._modify(local_id, completed=not task.completed)
        if task.completed:
            for callback in self.on_task_completed:
                callback(self)
        return task

    def toggle_favorite(self, local_id):
        task = self.get(local_id)
        if task is None:
            return None
        return self._modify(local_id, favorited=not task.favorited)

    def remove_task(self, local_id):
        return self._remove(local_id)

    def clear_completed(self):
        for task in [task for task in self.records if task.completed]:
            self._remove(task.local_id)

    def clear_all(self):
        for task in list(self.records):
            self._remove(task.local_id)

    def toggle_hide_completed(self):
        self.hide_completed = not self.hide_completed
        return self.hide_completed

    def reorder_task(self, local_id, target_index):
        """Move a task within the local list; ordering is not stored server-side."""
        task = self.get(local_id)
        if task is None:
            return False
        self.records.remove(task)
        target_index = max(0, min(target_index, len(self.records)))
        self.records.insert(target_index, task)
        self.persist_to_cache()
        return True
