from .admin import admin_bp
from .auth import auth_bp
from .courses import courses_bp
from .health import health_bp
from .preselection import preselection_bp
from .stats import stats_bp
from .students import students_bp
from .votes import votes_bp


def register_blueprints(app):
    app.register_blueprint(health_bp)
    app.register_blueprint(auth_bp, url_prefix="/api")
    app.register_blueprint(students_bp, url_prefix="/api")
    app.register_blueprint(courses_bp, url_prefix="/api")
    app.register_blueprint(preselection_bp, url_prefix="/api")
    app.register_blueprint(votes_bp, url_prefix="/api")
    app.register_blueprint(stats_bp, url_prefix="/api")
    app.register_blueprint(admin_bp, url_prefix="/api/admin")
