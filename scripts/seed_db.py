import os
import random
from datetime import timedelta

from dotenv import load_dotenv
from werkzeug.exceptions import Conflict

from focusboard.domain import default_time_of_day_stats, iso_utc, utc_now
from main import create_app


TASK_TITLES = [
    "Plan the week",
    "Review pull requests",
    "Write release notes",
    "Inbox zero",
    "Read one chapter",
    "Stretch for 10 minutes",
]

GOALS = [
    ("Ship the mobile beta", "short"),
    ("Run a half marathon", "long"),
    ("Learn to play piano", "life"),
]


def seed_db():
    load_dotenv()
    seed_email = os.getenv("SEED_USER_EMAIL", "seed@focusboard.local")
    seed_password = os.getenv("SEED_USER_PASSWORD", "seed-password")

    random.seed(42)
    app = create_app()
    services = app.extensions["focusboard"]

    with app.app_context():
        try:
            user = services.users.create_user("Seed User", seed_email, seed_password)
        except Conflict:
            raise RuntimeError(f"{seed_email} already exists; drop it or pick another email") from None
        user_id = user["id"]

        today = utc_now().date()
        for client_id, title in enumerate(TASK_TITLES, start=1):
            services.tasks.create_task(
                user_id,
                {
                    "id": client_id,
                    "title": title,
                    "completed": client_id % 3 == 0,
                    "favorited": client_id == 1,
                    "date": (today + timedelta(days=client_id)).isoformat(),
                },
            )

        for client_id, (title, category) in enumerate(GOALS, start=1):
            services.goals.create_goal(
                user_id, {"id": client_id, "title": title, "category": category}
            )

        now = utc_now()
        for offset in range(20, 0, -1):
            started = now - timedelta(days=offset // 3, hours=random.randint(0, 8))
            services.pomodoro.record_session(
                user_id, {"date": iso_utc(started), "duration": 25 * 60, "type": "work"}
            )

        logs = []
        for offset in range(13, -1, -1):
            day = today - timedelta(days=offset)
            logs.append(
                {
                    "date": day.isoformat(),
                    "completedTasks": random.randint(0, 5),
                    "totalTasks": len(TASK_TITLES),
                }
            )
        time_of_day = default_time_of_day_stats()
        for stat in time_of_day:
            stat["completed"] = random.randint(0, 12)
        services.statistics.save_statistics(
            user_id,
            {
                "currentStreak": 3,
                "longestStreak": 7,
                "lastActiveDate": today.isoformat(),
                "activityLogs": logs,
                "timeOfDayStats": time_of_day,
            },
        )


if __name__ == "__main__":
    seed_db()
    print("Seeded demo data.")
