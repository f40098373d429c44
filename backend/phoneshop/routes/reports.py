from __future__ import annotations
from flask import Blueprint, current_app, request
from phoneshop import get_db
from phoneshop.analytics.customers import customer_lifetime_value
from phoneshop.analytics.dashboard import dashboard_summary
from phoneshop.analytics.insights import business_insights
from phoneshop.analytics.sales import sales_summary, seasonal_patterns
from phoneshop.services import customers as customer_service
from phoneshop.services import devices as device_service
from phoneshop.services import repairs as repair_service
from phoneshop.services import sales as sale_service
from phoneshop.services import trade_ins as trade_in_service
from phoneshop.time_utils import days_ago, utcnow
from phoneshop.utils.serialization import jsonable
from phoneshop.utils.validation import coerce_datetime, coerce_int, coerce_range_end

rpt_bp = Blueprint('reports', __name__)

SUMMARY_DEFAULT_DAYS = 30
INSIGHTS_DEFAULT_DAYS = 90


def _date_range(default_days: int):
    """start/end query args (YYYY-MM-DD or ISO-8601); start defaults to the start of day ``default_days`` ago."""
    end = coerce_range_end(request.args.get('end'), 'end') or utcnow()
    start = coerce_datetime(request.args.get('start'), 'start') or days_ago(default_days, end)
    return start, end


@rpt_bp.get('/sales-summary')
def sales_summary_report():
    start, end = _date_range(SUMMARY_DEFAULT_DAYS)
    return jsonable(sales_summary(sale_service.list_sales(get_db()), start, end))


@rpt_bp.get('/seasonal')
def seasonal_report():
    return jsonable(seasonal_patterns(sale_service.list_sales(get_db())))


@rpt_bp.get('/clv')
def clv_report():
    session = get_db()
    rows = customer_lifetime_value(sale_service.list_sales(session), customer_service.list_customers(session))
    limit = request.args.get('limit')
    if limit:
        rows = rows[:coerce_int(limit, 'limit', minimum=1)]
    return {'data': jsonable(rows)}


@rpt_bp.get('/dashboard')
def dashboard_report():
    session = get_db()
    summary = dashboard_summary(
        sale_service.list_sales(session),
        device_service.list_devices(session),
        repair_service.list_tickets(session),
        utcnow(),
        current_app.config['LOW_STOCK_THRESHOLD'],
    )
    return jsonable(summary)


@rpt_bp.get('/insights')
def insights_report():
    session = get_db()
    start, end = _date_range(INSIGHTS_DEFAULT_DAYS)
    buckets = coerce_int(request.args.get('buckets', current_app.config['TRADE_IN_BUCKETS']), 'buckets', minimum=1)
    result = business_insights(
        sale_service.list_sales(session),
        customer_service.list_customers(session),
        trade_in_service.list_trade_ins(session),
        start, end, buckets,
    )
    return jsonable(result)
