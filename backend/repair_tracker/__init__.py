from flask import Flask
from werkzeug.exceptions import HTTPException
from flask_jwt_extended import JWTManager
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any

load_dotenv()

db_engine = None
SessionLocal = None
jwt = JWTManager()


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    from .config.settings import load_settings, JOB_STORE_MEMORY, JOB_STORE_SQL
    from .errors import RepairTrackerError
    app = Flask(__name__)

    app.config.update(load_settings())

    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    # Database
    db_url = app.config['DATABASE_URL']
    if db_url.endswith(':memory:'):
        # Ensure a single shared in-memory SQLite database across all sessions
        db_engine = create_engine(
            db_url,
            echo=False,
            future=True,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        db_engine = create_engine(db_url, echo=False, future=True)
    SessionLocal = scoped_session(sessionmaker(bind=db_engine, expire_on_commit=False, autoflush=False))

    jwt.init_app(app)
    from .services.identity import register_token_errors
    register_token_errors(jwt)

    # Job store and queue numbering policy
    from .services.store import SqlJobStore, MemoryJobStore
    from .services.queue_numbering import build_numbering
    store_kind = app.config['JOB_STORE']
    if store_kind == JOB_STORE_MEMORY:
        from .seeds.demo_jobs import demo_jobs
        from .utils.clock import local_now
        app.extensions['job_store'] = MemoryJobStore(demo_jobs(local_now(app.config['APP_TIMEZONE'])) if app.config['SEED_DEMO_JOBS'] else None)
    elif store_kind == JOB_STORE_SQL:
        app.extensions['job_store'] = SqlJobStore(get_db)
    else:
        raise ValueError(f'Unknown JOB_STORE {store_kind!r}')
    app.extensions['queue_numbering'] = build_numbering(app.config['QUEUE_NUMBER_POLICY'])

    from .routes.jobs import jobs_bp
    from .routes.auth import auth_bp
    app.register_blueprint(jobs_bp, url_prefix='/api/jobs')
    app.register_blueprint(auth_bp, url_prefix='/api/auth')

    @app.teardown_appcontext
    def remove_session(exc=None):
        SessionLocal.remove()

    @app.route('/health')
    def health():
        return {
            'status': 'OK',
            'message': 'Repair Tracking API is running!',
            'jobStore': app.config['JOB_STORE'],
            'queueNumberPolicy': app.config['QUEUE_NUMBER_POLICY'],
        }

    @app.route('/')
    def index():
        return {
            'message': 'Welcome to Repair Tracking API',
            'version': '1.0.0',
            'endpoints': {
                'health': '/health',
                'jobs': '/api/jobs',
                'createJob': 'POST /api/jobs',
                'jobStats': '/api/jobs/stats/summary',
                'currentQueue': '/api/jobs/queue/current',
                'analytics': '/api/jobs/analytics/overview',
                'dailyAnalytics': '/api/jobs/analytics/daily',
                'login': 'POST /api/auth/login',
            },
        }

    # Domain errors carry their own status code and body
    @app.errorhandler(RepairTrackerError)
    def handle_domain_error(e):  # type: ignore
        if e.status_code >= 500:
            app.logger.error('Job store failure: %s', e.message, exc_info=e.__cause__ or e)
        return e.to_dict(), e.status_code

    # Unified error handler producing standardized JSON shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            payload = {
                'success': False,
                'message': e.description,
                'error': {
                    'status': e.code,
                    'title': e.name,
                },
            }
            return payload, e.code
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        return {
            'success': False,
            'message': 'Unexpected error',
            'error': {
                'status': 500,
                'title': 'Internal Server Error',
            },
        }, 500

    # OpenAPI spec route (minimal)
    from .openapi import build_openapi_spec

    @app.route('/openapi.json')
    def openapi_spec():
        return build_openapi_spec()

    return app


def get_db():
    return SessionLocal()
