from shopcore import create_app, db
import os

config_name = os.environ.get('FLASK_ENV', 'production')
app = create_app(config_name)

# Catalog tables must exist before the first request
with app.app_context():
    try:
        db.create_all()
    except Exception as e:
        app.logger.error(f"Startup table check failed: {e}")

if __name__ == "__main__":
    app.run()
