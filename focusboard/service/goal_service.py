import logging

from werkzeug.exceptions import BadRequest, Conflict, NotFound

from focusboard.domain import GOAL_CATEGORIES, iso_utc, parse_iso_datetime, utc_now
from focusboard.errors import DuplicateRecordError
from focusboard.service.payloads import (
    optional_date,
    optional_text,
    require_body,
    require_client_id,
    require_title,
)


logger = logging.getLogger(__name__)


class GoalService:
    def __init__(self, repository, clock=utc_now):
        self.repository = repository
        self.clock = clock

    def list_goals(self, user_id):
        return self.repository.fetch_goals(user_id)

    def create_goal(self, user_id, payload):
        body = require_body(payload)
        title = require_title(body)
        client_id = require_client_id(body.get("id"))
        fields = self._goal_fields(body)
        created_at = parse_iso_datetime(body.get("createdAt")) or self.clock()
        try:
            with self.repository.transaction():
                goal_id = self.repository.create_goal(
                    user_id,
                    client_id,
                    title,
                    created_at=iso_utc(created_at),
                    **fields,
                )
        except DuplicateRecordError:
            raise Conflict(f"Goal {client_id} already exists") from None
        logger.info("goal created", extra={"user_id": user_id, "client_id": client_id})
        return goal_id, client_id

    def update_goal(self, user_id, client_id, payload):
        body = require_body(payload)
        title = require_title(body)
        fields = self._goal_fields(body)
        with self.repository.transaction():
            existing = self.repository.fetch_goal(user_id, client_id)
            if existing is None:
                raise NotFound("Goal not found or you don't have permission to update it")
            self.repository.update_goal(
                user_id,
                client_id,
                title,
                updated_at=self.clock().isoformat(),
                **fields,
            )
        logger.info("goal updated", extra={"user_id": user_id, "client_id": client_id})
        return existing["id"]

    def delete_goal(self, user_id, client_id):
        with self.repository.transaction():
            if self.repository.fetch_goal(user_id, client_id) is None:
                raise NotFound("Goal not found or you don't have permission to delete it")
            self.repository.delete_goal(user_id, client_id)
        logger.info("goal deleted", extra={"user_id": user_id, "client_id": client_id})

    @staticmethod
    def _goal_fields(body):
        category = body.get("category") or "short"
        if category not in GOAL_CATEGORIES:
            raise BadRequest(f"Invalid goal category: {category}")
        return {
            "description": optional_text(body, "description"),
            "category": category,
            "target_date": optional_date(body, "targetDate"),
            "completed": bool(body.get("completed")),
        }
