"""Flask API server exposing the ibmnet metrics."""

import logging
import logging.handlers
import atexit
import threading
import time
from flask import Flask, jsonify
from apscheduler.schedulers.background import BackgroundScheduler

from config import Config
import ibmnet

# Configure logging
logging.basicConfig(
    level=getattr(logging, Config.LOG_LEVEL),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
if Config.LOG_SYSLOG:
    try:
        logging.getLogger().addHandler(logging.handlers.SysLogHandler(address='/dev/log'))
    except OSError as e:
        logging.getLogger(__name__).warning(f"Syslog unavailable: {e}")
logger = logging.getLogger(__name__)

app = Flask(__name__)

_descriptors = []
_latest = {}
_latest_lock = threading.Lock()


def init_plugin(params: dict = None) -> list:
    """Load the ibmnet module and register its metrics."""
    global _descriptors

    ibmnet.metric_cleanup()
    _descriptors = ibmnet.metric_init(params if params is not None else Config.get_plugin_params())
    with _latest_lock:
        _latest.clear()

    logger.info(f"Registered {len(_descriptors)} metrics")
    return _descriptors


def shutdown_plugin():
    """Release the ibmnet module state."""
    global _descriptors

    ibmnet.metric_cleanup()
    _descriptors = []


def collect_all_metrics():
    """Poll every registered metric and cache the values."""
    logger.debug("Collecting metrics...")

    for descriptor in _descriptors:
        name = descriptor['name']
        try:
            value = descriptor['call_back'](name)
        except Exception as e:
            logger.error(f"Error collecting {name}: {e}")
            continue

        with _latest_lock:
            _latest[name] = {
                'value': value,
                'units': descriptor['units'],
                'timestamp': time.time(),
            }

    logger.debug("Metrics collection complete")


def _find_descriptor(name: str):
    return next((d for d in _descriptors if d['name'] == name), None)


# API Routes
@app.route('/api/metrics')
def get_metrics():
    """Get the most recently polled value of every metric."""
    with _latest_lock:
        latest = dict(_latest)

    return jsonify({
        'group': ibmnet.METRIC_GROUP,
        'metrics': [
            {
                'name': d['name'],
                'description': d['description'],
                'units': d['units'],
                **latest.get(d['name'], {'value': None, 'timestamp': None}),
            }
            for d in _descriptors
        ]
    })


@app.route('/api/metrics/<name>')
def get_metric(name):
    """Poll a single metric through the plugin handler."""
    descriptor = _find_descriptor(name)
    if descriptor is None:
        return jsonify({'error': f'Unknown metric {name}'}), 404

    return jsonify({
        'name': name,
        'value': descriptor['call_back'](name),
        'units': descriptor['units'],
    })


@app.route('/api/adapters')
def get_adapters():
    """Get the discovered adapters and whether they are still sampled."""
    poller = ibmnet.get_poller()
    if poller is None:
        return jsonify({'error': 'plugin not initialized'}), 503

    return jsonify(poller.status())


@app.route('/api/config')
def get_config():
    """Get current configuration."""
    return jsonify({
        'collection_interval_seconds': Config.COLLECTION_INTERVAL,
        'plugin': Config.get_plugin_params(),
    })


@app.route('/health')
def health_check():
    """Health check endpoint."""
    return jsonify({'status': 'healthy'})


def start_scheduler():
    """Start the background scheduler for metric collection."""
    scheduler = BackgroundScheduler()

    scheduler.add_job(
        collect_all_metrics,
        'interval',
        seconds=Config.COLLECTION_INTERVAL,
        id='collect_metrics',
        replace_existing=True,
        max_instances=1
    )

    scheduler.start()
    atexit.register(shutdown_plugin)
    atexit.register(lambda: scheduler.shutdown())

    return scheduler


# Initialize on module load (runs with gunicorn)
if Config.AUTOSTART:
    init_plugin()
    collect_all_metrics()
    scheduler = start_scheduler()
    logger.info("ibmnet monitor initialized")


if __name__ == '__main__':
    # Run Flask development server
    app.run(
        host=Config.HOST,
        port=Config.PORT,
        debug=Config.DEBUG
    )
