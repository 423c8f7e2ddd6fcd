"""Create the users table for the SQL account store."""

from pathlib import Path
import sys

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app import create_app
from models import db


def main() -> None:
    app = create_app()
    if app.config["ACCOUNT_STORE"] != "sql":
        print("ACCOUNT_STORE is not 'sql'; nothing to create.")
        return
    with app.app_context():
        db.create_all()
        print(f"Tables ready on {app.config['SQLALCHEMY_DATABASE_URI']}")


if __name__ == "__main__":
    main()
