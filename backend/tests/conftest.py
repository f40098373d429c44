import os, sys, pytest
# Ensure the backend directory is on path so 'phoneshop' and 'tests' can be imported
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)
from phoneshop import create_app, get_db
from phoneshop.models import Base
from phoneshop.seeds.fixtures import load_fixtures


@pytest.fixture(scope='session')
def app_instance():
    app = create_app({
        'TESTING': True,
        'DATABASE_URL': 'sqlite+pysqlite:///:memory:',
        'SEED_FIXTURES': False,
    })
    yield app


@pytest.fixture(autouse=True)
def clean_store(app_instance):
    """Every test starts from an empty store with fresh id sequences."""
    session = get_db()
    session.rollback()
    for table in reversed(Base.metadata.sorted_tables):
        session.execute(table.delete())
    session.commit()
    session.expunge_all()
    yield
    session.rollback()


@pytest.fixture()
def client(app_instance):
    return app_instance.test_client()


@pytest.fixture()
def session(app_instance):
    return get_db()


@pytest.fixture()
def seeded(session):
    """Store loaded with the bundled JSON fixtures."""
    return load_fixtures(session)
