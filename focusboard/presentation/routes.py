from flask import request

from focusboard.auth.session import auth_required
from focusboard.presentation.serializers import (
    goal_to_client,
    pomodoro_statistics_to_client,
    task_to_client,
    user_statistics_to_client,
)


def register_routes(app, services):
    @app.route("/api/health", methods=["GET"])
    def health():
        return {"status": "ok"}

    @app.route("/api/tasks", methods=["GET"])
    @auth_required
    def list_tasks(auth):
        tasks = services.tasks.list_tasks(auth.user_id)
        return {"tasks": [task_to_client(task) for task in tasks], "success": True}

    @app.route("/api/tasks", methods=["POST"])
    @auth_required
    def create_task(auth):
        task_id, client_id = services.tasks.create_task(
            auth.user_id, request.get_json(silent=True)
        )
        return {
            "success": True,
            "message": "Task saved successfully",
            "taskId": task_id,
            "clientId": client_id,
        }

    @app.route("/api/tasks/<int:client_id>", methods=["PUT"])
    @auth_required
    def update_task(auth, client_id):
        task_id = services.tasks.update_task(
            auth.user_id, client_id, request.get_json(silent=True)
        )
        return {"success": True, "message": "Task updated successfully", "taskId": task_id}

    @app.route("/api/tasks/<int:client_id>", methods=["DELETE"])
    @auth_required
    def delete_task(auth, client_id):
        services.tasks.delete_task(auth.user_id, client_id)
        return {"success": True, "message": "Task deleted successfully"}

    @app.route("/api/goals", methods=["GET"])
    @auth_required
    def list_goals(auth):
        goals = services.goals.list_goals(auth.user_id)
        return {"goals": [goal_to_client(goal) for goal in goals], "success": True}

    @app.route("/api/goals", methods=["POST"])
    @auth_required
    def create_goal(auth):
        goal_id, client_id = services.goals.create_goal(
            auth.user_id, request.get_json(silent=True)
        )
        return {
            "success": True,
            "message": "Goal saved successfully",
            "goalId": goal_id,
            "clientId": client_id,
        }

    @app.route("/api/goals/<int:client_id>", methods=["PUT"])
    @auth_required
    def update_goal(auth, client_id):
        goal_id = services.goals.update_goal(
            auth.user_id, client_id, request.get_json(silent=True)
        )
        return {"success": True, "message": "Goal updated successfully", "goalId": goal_id}

    @app.route("/api/goals/<int:client_id>", methods=["DELETE"])
    @auth_required
    def delete_goal(auth, client_id):
        services.goals.delete_goal(auth.user_id, client_id)
        return {"success": True, "message": "Goal deleted successfully"}

    @app.route("/api/pomodoro/sessions", methods=["POST"])
    @auth_required
    def create_pomodoro_session(auth):
        services.pomodoro.record_session(auth.user_id, request.get_json(silent=True))
        return {"success": True, "message": "Session saved successfully"}

    @app.route("/api/pomodoro/statistics", methods=["GET"])
    @auth_required
    def pomodoro_statistics(auth):
        stats, sessions, today = services.pomodoro.get_statistics(auth.user_id)
        return {
            "statistics": pomodoro_statistics_to_client(stats, sessions, today),
            "success": True,
        }

    @app.route("/api/statistics", methods=["GET"])
    @auth_required
    def user_statistics(auth):
        stats = services.statistics.get_statistics(auth.user_id)
        return {"success": True, **user_statistics_to_client(stats)}

    @app.route("/api/statistics", methods=["POST"])
    @auth_required
    def save_user_statistics(auth):
        services.statistics.save_statistics(auth.user_id, request.get_json(silent=True))
        return {"success": True, "message": "Statistics saved successfully"}
