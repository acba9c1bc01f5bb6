from focusboard.client.collection_store import SyncedCollectionStore
from focusboard.client.records import Goal
from focusboard.domain import GOAL_CATEGORIES, iso_utc


class GoalStore(SyncedCollectionStore):
    record_type = Goal
    cache_key = "goals"
    resource = "goal"

    def _list_remote(self):
        return self.api.list_goals()

    def _create_remote(self, record):
        return self.api.create_goal(record.to_payload())

    def _update_remote(self, record):
        return self.api.update_goal(record.local_id, record.to_payload())

    def _delete_remote(self, local_id):
        self.api.delete_goal(local_id)

    @property
    def goals(self):
        return self.records

    def _by_category(self, category):
        return [goal for goal in self.records if goal.category == category]

    @property
    def short_term_goals(self):
        return self._by_category("short")

    @property
    def long_term_goals(self):
        return self._by_category("long")

    @property
    def life_goals(self):
        return self._by_category("life")

    @property
    def completed_goals(self):
        return [goal for goal in self.records if goal.completed]

    def add_goal(self, title, description="", category="short", target_date=None):
        title = (title or "").strip()
        if not title:
            return None
        if category not in GOAL_CATEGORIES:
            raise ValueError(f"Invalid goal category: {category}")
        goal = Goal(
            local_id=self._allocate_id(),
            title=title,
            description=description or "",
            category=category,
            target_date=target_date,
            created_at=iso_utc(self.clock()),
        )
        return self._insert(goal)

    def update_goal(self, local_id, **changes):
        if "title" in changes:
            title = (changes["title"] or "").strip()
            if not title:
                return None
            changes["title"] = title
        if "category" in changes and changes["category"] not in GOAL_CATEGORIES:
            raise ValueError(f"Invalid goal category: {changes['category']}")
        return self._modify(local_id, **changes)

    def toggle_complete(self, local_id):
        goal = self.get(local_id)
        if goal is None:
            return None
        return self._modify(local_id, completed=not goal.completed)

    def delete_goal(self, local_id):
        return self._remove(local_id)
