"""WSGI entrypoint: ``flask --app app run`` or ``python app.py``."""

import os

from timeclock.main import create_app

app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=int(os.getenv("PORT", "3001")))
