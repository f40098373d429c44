from flask import Flask
from werkzeug.exceptions import HTTPException
from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, scoped_session
from dotenv import load_dotenv
from typing import Optional, Dict, Any
import logging
import os

load_dotenv()

db_engine = None
SessionLocal = None


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ('1', 'true', 'yes', 'on')


def create_app(config: Optional[Dict[str, Any]] = None):
    global db_engine, SessionLocal
    app = Flask(__name__)

    app.config['DATABASE_URL'] = os.getenv('DATABASE_URL', 'sqlite+pysqlite:///:memory:')
    app.config['SEED_FIXTURES'] = _env_flag('SEED_FIXTURES', 'true')
    app.config['TAX_RATE'] = float(os.getenv('TAX_RATE', '0.08'))
    app.config['LOW_STOCK_THRESHOLD'] = int(os.getenv('LOW_STOCK_THRESHOLD', '10'))
    app.config['REORDER_WINDOW_DAYS'] = int(os.getenv('REORDER_WINDOW_DAYS', '30'))
    app.config['TRADE_IN_BUCKETS'] = int(os.getenv('TRADE_IN_BUCKETS', '15'))
    app.config['LOG_LEVEL'] = os.getenv('LOG_LEVEL', 'INFO')

    if config:
        # allow tests or callers to override default config values
        app.config.update(config)

    logging.basicConfig(
        level=getattr(logging, str(app.config['LOG_LEVEL']).upper(), logging.INFO),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    # Store: a single shared in-memory SQLite database across all sessions
    db_url = app.config['DATABASE_URL']
    if db_url.endswith(':memory:'):
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

    from .models import Base
    Base.metadata.create_all(db_engine)
    if app.config['SEED_FIXTURES']:
        from .seeds.fixtures import load_fixtures
        load_fixtures(get_db())

    from .routes.customers import cust_bp  # customers / CRM
    from .routes.inventory import inv_bp  # devices and stock
    from .routes.sales import sales_bp  # point of sale
    from .routes.repairs import rpr_bp  # repair tickets
    from .routes.suppliers import sup_bp  # suppliers
    from .routes.supplier_orders import so_bp  # supplier orders and reorder suggestions
    from .routes.trade_ins import ti_bp  # trade-ins
    from .routes.warranty import wty_bp  # warranty claims
    from .routes.reports import rpt_bp  # analytics
    app.register_blueprint(cust_bp, url_prefix='/customers')
    app.register_blueprint(inv_bp, url_prefix='/inventory')
    app.register_blueprint(sales_bp, url_prefix='/sales')
    app.register_blueprint(rpr_bp, url_prefix='/repairs')
    app.register_blueprint(sup_bp, url_prefix='/suppliers')
    app.register_blueprint(so_bp, url_prefix='/suppliers')  # orders live under the supplier namespace
    app.register_blueprint(ti_bp, url_prefix='/trade-ins')
    app.register_blueprint(wty_bp, url_prefix='/warranty')
    app.register_blueprint(rpt_bp, url_prefix='/reports')

    @app.route('/healthz')
    def health():
        return {'status': 'ok'}

    from .errors import ShopError

    @app.errorhandler(ShopError)
    def handle_shop_error(e: ShopError):
        get_db().rollback()
        return {
            'error': {
                'status': e.status_code,
                'title': e.title,
                'detail': str(e),
            }
        }, e.status_code

    # Unified error handler producing standardized JSON shape
    @app.errorhandler(Exception)
    def handle_errors(e):  # type: ignore
        if isinstance(e, HTTPException):
            payload = {
                'error': {
                    'status': e.code,
                    'title': e.name,
                    'detail': e.description,
                }
            }
            return payload, e.code
        # Unhandled exception
        app.logger.exception('Unhandled exception')
        get_db().rollback()
        return {
            'error': {
                'status': 500,
                'title': 'Internal Server Error',
                'detail': 'Unexpected error'
            }
        }, 500

    return app


def get_db():
    return SessionLocal()
