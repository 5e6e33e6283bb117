"""
GalleryConfig - Runtime configuration from environment variables.
"""

import os
from dataclasses import dataclass
from typing import List, Optional

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')


def str2bool(value, default: bool = False) -> bool:
    """Convert diverse string values into True or False."""
    if value is None:
        return default
    true_set = {'yes', 'true', 't', 'y', '1', 'on'}
    false_set = {'no', 'false', 'f', 'n', '0', 'off', ''}
    value = str(value).strip().lower()
    if value in true_set:
        return True
    if value in false_set:
        return False
    raise ValueError('Expected "%s"' % '", "'.join(sorted(true_set | false_set)))


@dataclass
class GalleryConfig:
    """
    Configuration for the gallery server and CLI.

    Attributes:
        base_dir: Directory holding the CW_<n> period folders
        host: Interface the web server binds to
        port: Port the web server listens on
        link_prefix: URL prefix under which media files are served
        static_dir: Directory with static assets (favicon, css)
        server: Bottle server adapter name
        debug: Enable Bottle debug mode and reloader
        log_level: Logging level name
        log_file: Optional log file, stderr when unset
    """
    base_dir: str = '.'
    host: str = '0.0.0.0'
    port: int = 8080
    link_prefix: str = 'mm'
    static_dir: str = 'static'
    server: str = 'wsgiref'
    debug: bool = False
    log_level: str = 'INFO'
    log_file: Optional[str] = None

    ENV_PREFIX = 'MMGALLERY_'

    @classmethod
    def from_env(cls) -> 'GalleryConfig':
        """Build a config from MMGALLERY_* environment variables."""
        def env(name: str, default=None):
            return os.environ.get(cls.ENV_PREFIX + name, default)

        port = env('PORT')
        return cls(
            base_dir=env('DIR', '.'),
            host=env('HOST', '0.0.0.0'),
            port=int(port) if port else 8080,
            link_prefix=env('LINK_PREFIX', 'mm'),
            static_dir=env('STATIC_DIR', 'static'),
            server=env('SERVER', 'wsgiref'),
            debug=str2bool(env('DEBUG'), default=False),
            log_level=env('LOG_LEVEL', 'INFO').upper(),
            log_file=env('LOG_FILE') or None,
        )

    def validate(self) -> List[str]:
        """Return a list of configuration errors, empty when valid."""
        errors = []
        if not self.base_dir:
            errors.append("Base directory is required (MMGALLERY_DIR or --dir)")
        elif not os.path.isdir(self.base_dir):
            errors.append(f"Base directory does not exist: {self.base_dir}")
        if not 0 < self.port < 65536:
            errors.append(f"Port out of range: {self.port}")
        if not self.link_prefix or '/' in self.link_prefix:
            errors.append(f"Link prefix must be a single path segment: {self.link_prefix!r}")
        if self.log_level.upper() not in LOG_LEVELS:
            errors.append(f"Unknown log level: {self.log_level}")
        return errors
