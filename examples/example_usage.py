"""Example: drive the service layer directly (no Flask).

Controllers are a thin layer; the workflow rules live in the services.
"""

import importlib
from datetime import date

from config import get_settings_module

from src.vacation_tracker.vacation_tracker.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, secret_key=settings.SECRET_KEY)

    user = container.auth_service.authenticate("user@taskflow.com", "user123")
    vacation = container.vacation_service.create(
        current_user=user,
        start_date=date(2024, 6, 1),
        end_date=date(2024, 6, 5),
    )
    print(container.vacation_service.to_response(vacation))


if __name__ == "__main__":
    main()
