"""AWS Lambda handler for the WebTrac class calendar API."""
import json
import logging
import os
import re
import time
from datetime import datetime
from typing import Dict, Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from calendar_grid.extractor import extract
from calendar_grid.models import ExtractOptions
from webtrac.client import WebTracClient


DATE_PARAM = re.compile(r"^\d{4}-\d{2}-\d{2}$")


# Configure JSON logging
class JsonFormatter(logging.Formatter):
    """Custom JSON formatter for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name
        }

        if record.exc_info:
            log_data['exception'] = self.formatException(record.exc_info)

        return json.dumps(log_data)


def setup_logging(log_level: str = 'INFO') -> None:
    """
    Configure logging with JSON formatter.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    root_logger = logging.getLogger()

    # Remove existing handlers
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setFormatter(JsonFormatter())
    root_logger.addHandler(handler)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))


def _response(
    status_code: int,
    body: Any,
    headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    response_headers = {'Content-Type': 'application/json'}
    response_headers.update(headers or {})
    return {
        'statusCode': status_code,
        'headers': response_headers,
        'body': json.dumps(body)
    }


def _parse_date_param(value: str):
    """Parse a YYYY-MM-DD query value, or None if malformed."""
    if not DATE_PARAM.match(value):
        return None
    try:
        return datetime.strptime(value, '%Y-%m-%d').date()
    except ValueError:
        return None


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Handle GET /api/classes?start=YYYY-MM-DD&end=YYYY-MM-DD[&debug=1].

    Args:
        event: API Gateway proxy event
        context: Lambda context object

    Returns:
        API Gateway proxy response. The body is the calendar mapping
        {slug: {label, events}}, or {diag, sampleOutKeys, CALS} in debug mode.
    """
    # Read configuration from environment variables
    detail_base = os.environ.get('WEBTRAC_DETAIL_BASE', '')
    base_origin = os.environ.get('BASE_ORIGIN', '')
    timezone_name = os.environ.get('SCHEDULE_TIMEZONE', 'UTC')
    log_level = os.environ.get('LOG_LEVEL', 'INFO')
    timeout_seconds = int(os.environ.get('TIMEOUT_SECONDS', '30'))
    cache_max_age = int(os.environ.get('CACHE_MAX_AGE', '300'))

    setup_logging(log_level)
    logger = logging.getLogger(__name__)

    params = (event or {}).get('queryStringParameters') or {}
    start_param = str(params.get('start') or '')
    end_param = str(params.get('end') or '')
    debug = str(params.get('debug') or '') == '1'

    start_date = _parse_date_param(start_param)
    end_date = _parse_date_param(end_param)
    if start_date is None or end_date is None:
        logger.warning(f"Rejected date range start={start_param!r} end={end_param!r}")
        return _response(400, {'error': 'Provide start and end as YYYY-MM-DD'})

    if not detail_base:
        logger.error("WEBTRAC_DETAIL_BASE is not configured")
        return _response(500, {'error': 'WEBTRAC_DETAIL_BASE not configured'})

    try:
        timezone = ZoneInfo(timezone_name)
    except (ZoneInfoNotFoundError, ValueError):
        logger.error(f"Unknown SCHEDULE_TIMEZONE: {timezone_name}")
        return _response(500, {'error': f'Unknown SCHEDULE_TIMEZONE: {timezone_name}'})

    start_time = time.time()
    logger.info(
        "Calendar request started",
        extra={
            'start': start_param,
            'end': end_param,
            'debug': debug,
            'timezone': timezone_name
        }
    )

    try:
        client = WebTracClient(detail_base=detail_base, timeout=timeout_seconds)

        try:
            html_content = client.fetch_detail_html(start_date, end_date)
        except Exception as e:
            logger.error(
                f"Failed to fetch schedule page: {str(e)}",
                extra={'error_type': type(e).__name__},
                exc_info=True
            )
            return _response(500, {
                'error': str(e) or 'Fetch failed',
                'error_type': type(e).__name__
            })

        options = ExtractOptions(
            week_anchor=start_date,
            base_origin=base_origin,
            timezone=timezone
        )
        result = extract(html_content, options)
        calendars = result.to_dict()

        duration = time.time() - start_time
        logger.info(
            "Calendar request completed successfully",
            extra={
                'duration_seconds': round(duration, 2),
                'calendars': len(calendars),
                'parser': result.diagnostics.parser
            }
        )

        if debug:
            return _response(200, {
                'diag': result.diagnostics.to_dict(),
                'sampleOutKeys': list(calendars.keys()),
                'CALS': calendars
            })

        return _response(200, calendars, headers={
            'Cache-Control': (
                f's-maxage={cache_max_age}, '
                f'stale-while-revalidate={cache_max_age}'
            )
        })

    except Exception as e:
        duration = time.time() - start_time
        logger.error(
            f"Calendar request failed: {str(e)}",
            extra={
                'duration_seconds': round(duration, 2),
                'error_type': type(e).__name__
            },
            exc_info=True
        )
        return _response(500, {'error': str(e) or 'Scrape failed'})
