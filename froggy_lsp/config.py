"""
Server settings.

Read from the environment at startup, then refined by whatever the client
passes as ``initializationOptions``.

MIT/Apache 2.0 License - Froggy LSP authors 2025
"""

import logging
import os
import sys
from collections.abc import Mapping
from dataclasses import dataclass, replace
from typing import Optional

from .labels import LabelPolicy

logger = logging.getLogger(__name__)

ENV_LABEL_POLICY = 'FROGGY_LSP_LABEL_POLICY'
ENV_LOG_LEVEL = 'FROGGY_LSP_LOG_LEVEL'

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def parse_label_policy(raw: Optional[str]) -> Optional[LabelPolicy]:
    """'first' / 'last' (any case) -> LabelPolicy, anything else -> None."""
    if not raw:
        return None
    try:
        return LabelPolicy(str(raw).strip().lower())
    except ValueError:
        logger.warning('Unknown label policy %r, expected "first" or "last"', raw)
        return None


def parse_log_level(raw: Optional[str]) -> Optional[int]:
    if not raw:
        return None
    level = getattr(logging, str(raw).upper(), None)
    if isinstance(level, int):
        return level
    logger.warning('Unknown log level %r', raw)
    return None


@dataclass(frozen=True)
class ServerConfig:
    label_policy: LabelPolicy = LabelPolicy.LAST_WINS
    log_level: Optional[str] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'ServerConfig':
        environ = os.environ if environ is None else environ
        policy = parse_label_policy(environ.get(ENV_LABEL_POLICY))
        return cls(
            label_policy=policy or LabelPolicy.LAST_WINS,
            log_level=environ.get(ENV_LOG_LEVEL) or None,
        )

    def with_init_options(self, options: Optional[Mapping]) -> 'ServerConfig':
        """Overlay ``labelPolicy`` / ``logLevel`` from initializationOptions."""
        if not isinstance(options, Mapping):
            return self
        config = self
        policy = parse_label_policy(options.get('labelPolicy'))
        if policy is not None:
            config = replace(config, label_policy=policy)
        if parse_log_level(options.get('logLevel')) is not None:
            config = replace(config, log_level=options['logLevel'])
        return config


def configure_logging(level: Optional[str] = None):
    """Send log output to stderr; stdout belongs to the protocol."""
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(handler)
    apply_log_level(level)


def apply_log_level(raw: Optional[str]):
    level = parse_log_level(raw)
    logging.getLogger().setLevel(level if level is not None else logging.WARNING)
