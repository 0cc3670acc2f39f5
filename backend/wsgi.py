# backend/wsgi.py
from claimsdesk import create_app

app = create_app()


if __name__ == "__main__":
    port = app.config["PORT"]
    app.logger.info("Claims API listening on port %s", port)
    app.logger.info("Using database: %s", app.config["SQLALCHEMY_DATABASE_URI"])
    app.run(port=port, threaded=True)
