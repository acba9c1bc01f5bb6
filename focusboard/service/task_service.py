import logging

from werkzeug.exceptions import BadRequest, Conflict, NotFound

from focusboard.domain import utc_now
from focusboard.errors import DuplicateRecordError
from focusboard.service.payloads import (
    optional_date,
    optional_text,
    require_body,
    require_client_id,
    require_title,
)


logger = logging.getLogger(__name__)


class TaskService:
    def __init__(self, repository, clock=utc_now):
        self.repository = repository
        self.clock = clock

    def list_tasks(self, user_id):
        return self.repository.fetch_tasks(user_id)

    def create_task(self, user_id, payload):
        body = require_body(payload)
        title = require_title(body)
        client_id = require_client_id(body.get("id"))
        fields = self._task_fields(body)
        try:
            with self.repository.transaction():
                task_id = self.repository.create_task(
                    user_id,
                    client_id,
                    title,
                    created_at=self.clock().isoformat(),
                    **fields,
                )
        except DuplicateRecordError:
            raise Conflict(f"Task {client_id} already exists") from None
        logger.info("task created", extra={"user_id": user_id, "client_id": client_id})
        return task_id, client_id

    def update_task(self, user_id, client_id, payload):
        body = require_body(payload)
        title = require_title(body)
        fields = self._task_fields(body)
        with self.repository.transaction():
            existing = self.repository.fetch_task(user_id, client_id)
            if existing is None:
                raise NotFound("Task not found or you don't have permission to update it")
            self.repository.update_task(
                user_id,
                client_id,
                title,
                updated_at=self.clock().isoformat(),
                **fields,
            )
        logger.info("task updated", extra={"user_id": user_id, "client_id": client_id})
        return existing["id"]

    def delete_task(self, user_id, client_id):
        with self.repository.transaction():
            if self.repository.fetch_task(user_id, client_id) is None:
                raise NotFound("Task not found or you don't have permission to delete it")
            self.repository.delete_task(user_id, client_id)
        logger.info("task deleted", extra={"user_id": user_id, "client_id": client_id})

    @staticmethod
    def _task_fields(body):
        task_time = body.get("time")
        if task_time is not None and not isinstance(task_time, str):
            raise BadRequest(f"Invalid time: {task_time}")
        return {
            "description": optional_text(body, "description"),
            "completed": bool(body.get("completed")),
            "favorited": bool(body.get("favorited")),
            "task_date": optional_date(body, "date"),
            "task_time": task_time or None,
        }
