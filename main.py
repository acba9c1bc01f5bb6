import logging

from flask import Flask

from focusboard.auth.routes import register_auth_routes
from focusboard.config import load_config
from focusboard.errors import register_error_handlers
from focusboard.presentation.routes import register_routes
from focusboard.repository.postgres_repository import PostgresRepository
from focusboard.repository.sqlite_repository import SQLiteRepository
from focusboard.service.goal_service import GoalService
from focusboard.service.pomodoro_service import PomodoroService
from focusboard.service.statistics_service import StatisticsService
from focusboard.service.task_service import TaskService
from focusboard.service.user_service import UserService


class Services:
    def __init__(self, repository):
        self.repository = repository
        self.users = UserService(repository)
        self.tasks = TaskService(repository)
        self.goals = GoalService(repository)
        self.pomodoro = PomodoroService(repository)
        self.statistics = StatisticsService(repository)


def build_repository(config):
    database_url = config.get("DATABASE_URL")
    if database_url and database_url.startswith(("postgres://", "postgresql://")):
        return PostgresRepository(database_url)
    return SQLiteRepository(config["SQLITE_PATH"])


def create_app(overrides=None):
    app = Flask(__name__)
    app.config.update(load_config())
    if overrides:
        app.config.update(overrides)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    repository = build_repository(app.config)
    services = Services(repository)
    app.extensions["focusboard"] = services
    app.teardown_appcontext(repository.close_db)

    with app.app_context():
        repository.init_db()

    register_error_handlers(app)
    register_auth_routes(app)
    register_routes(app, services)
    return app


if __name__ == "__main__":
    create_app().run(host="0.0.0.0", port=5000, debug=True)
