"""Entry point for `flask run` / `python app.py`."""

from src.vacation_tracker.vacation_tracker.main import create_app

app = create_app()


if __name__ == "__main__":
    app.run(debug=bool(app.config.get("DEBUG", False)))
