import os, sys, pytest
# Ensure backend directory is on path so 'repair_tracker' can be imported from a source checkout
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from repair_tracker import create_app, get_db
from repair_tracker.models.authz import Base
# Import all model modules to ensure tables are registered before create_all
import repair_tracker.models.repair_job  # noqa: F401

@pytest.fixture(scope='session', autouse=True)
def app_instance():
    os.environ['DATABASE_URL'] = 'sqlite+pysqlite:///:memory:'
    app = create_app({'DATABASE_URL': 'sqlite+pysqlite:///:memory:', 'JOB_STORE': 'sql', 'QUEUE_NUMBER_POLICY': 'daily'})
    # After app and blueprints are registered, ensure all tables exist
    with app.app_context():
        engine = get_db().get_bind()
        Base.metadata.create_all(engine)
    yield app

@pytest.fixture()
def app_context(app_instance):
    with app_instance.app_context():
        yield app_instance

@pytest.fixture()
def client(app_context):
    return app_context.test_client()

@pytest.fixture()
def clean_jobs(app_context):
    from tests.test_utils_seed import clear_jobs
    clear_jobs()
    yield
    clear_jobs()
