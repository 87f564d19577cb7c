import atexit
from flask import Flask
from roombook.config import DevelopmentConfig
from roombook.extensions import db, migrate, sock

def create_app(config_class=DevelopmentConfig):
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.logger.setLevel(app.config['LOG_LEVEL'])

    # Initialize extensions
    db.init_app(app)
    migrate.init_app(app, db)
    sock.init_app(app)

    from roombook import models  # noqa: F401  register tables

    # One notification hub per process, closed on exit
    from roombook.services.notification_hub import KitchenNotificationHub
    hub = KitchenNotificationHub(logger=app.logger)
    app.extensions['kitchen_hub'] = hub
    atexit.register(hub.shutdown)

    from roombook.services.room_locks import RoomDayLocks
    app.extensions['room_day_locks'] = RoomDayLocks()

    # Register Blueprints
    from roombook.api.routes.auth import auth_bp
    from roombook.api.routes.admin import admin_bp
    from roombook.api.routes.rooms import rooms_bp
    from roombook.api.routes.bookings import bookings_bp
    from roombook.api.routes.kitchen import kitchen_bp
    from roombook.api.routes.dashboard import dashboard_bp
    from roombook.api.routes.ws import ws_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(admin_bp, url_prefix='/api/users')
    app.register_blueprint(rooms_bp, url_prefix='/api/rooms')
    app.register_blueprint(bookings_bp, url_prefix='/api/bookings')
    app.register_blueprint(kitchen_bp, url_prefix='/api/kitchen')
    app.register_blueprint(dashboard_bp, url_prefix='/api/dashboard')
    app.register_blueprint(ws_bp)

    @app.route('/health')
    def health():
        return {"status": "ok", "app": "roombook"}

    return app
