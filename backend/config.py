"""Configuration settings for the ibmnet monitor."""

import os


class Config:
    """Application configuration."""

    # Minimum seconds between two entstat runs for the same adapter
    MIN_SAMPLE_INTERVAL = float(os.environ.get('MIN_SAMPLE_INTERVAL', 5.0))

    # Hard ceiling for a single entstat run; adapters exceeding it are disabled
    SAMPLE_TIMEOUT = float(os.environ.get('SAMPLE_TIMEOUT', 5.0))

    # Ceiling for the lsdev inventory command
    DISCOVERY_TIMEOUT = float(os.environ.get('DISCOVERY_TIMEOUT', 10))

    # AIX command locations
    LSDEV_PATH = os.environ.get('LSDEV_PATH', '/usr/sbin/lsdev')
    ENTSTAT_PATH = os.environ.get('ENTSTAT_PATH', '/usr/bin/entstat')

    # Login records holding the BOOT_TIME entry
    UTMP_PATH = os.environ.get('UTMP_PATH', '/var/run/utmp')

    # Host polling interval in seconds
    COLLECTION_INTERVAL = int(os.environ.get('COLLECTION_INTERVAL', 15))

    # Seconds a metric may go unreported before the host considers it stale
    METRIC_TMAX = int(os.environ.get('METRIC_TMAX', 60))

    # Web server settings
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', 8651))
    DEBUG = os.environ.get('DEBUG', 'false').lower() == 'true'

    # Load the plugin and start polling when app.py is imported
    AUTOSTART = os.environ.get('AUTOSTART', 'true').lower() == 'true'

    # Logging
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'WARNING')
    LOG_SYSLOG = os.environ.get('LOG_SYSLOG', 'false').lower() == 'true'

    @classmethod
    def get_plugin_params(cls) -> dict:
        """Return the parameters handed to the plugin's metric_init."""
        return {
            'min_sample_interval': cls.MIN_SAMPLE_INTERVAL,
            'sample_timeout': cls.SAMPLE_TIMEOUT,
            'discovery_timeout': cls.DISCOVERY_TIMEOUT,
            'lsdev_path': cls.LSDEV_PATH,
            'entstat_path': cls.ENTSTAT_PATH,
            'utmp_path': cls.UTMP_PATH,
            'time_max': cls.METRIC_TMAX,
        }
