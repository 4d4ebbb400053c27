"""Configuration system for SnapTreeLib.

This module defines how callers describe the remote service they talk to
(ClientConfig) and how a snapshot browse should behave (BrowseConfig).
Both are plain dataclasses passed explicitly into the components that need
them; nothing is read from module-level state.
"""

import logging
import os
import sys
from dataclasses import dataclass
from typing import FrozenSet, List, Optional

from .errors import ConfigurationError


# Key of the synthetic top-of-tree placeholder in a snapshot namespace
ROOT_NODE_KEY = 0

# Number of container levels discovered below the root
DEFAULT_MAX_DEPTH = 5

DEFAULT_PAGE_SIZE = 100
DEFAULT_TIMEOUT = 30.0

# Directory-service object classes that can hold children (lower-cased)
CONTAINER_KINDS: FrozenSet[str] = frozenset({
    "organizationalunit",
    "container",
    "builtindomain",
    "domaindns",
    "lostandfound",
})

INSTANCE_HEADER = "X-Instance-Label"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
FALSE_VALUES = frozenset({"0", "false", "no", "off"})


@dataclass
class ClientConfig:
    """Connection settings for the remote GraphQL API.

    Attributes:
        endpoint: Full URL of the GraphQL endpoint
        access_token: Pre-issued bearer token
        timeout: Per-request timeout in seconds, enforced by httpx
        page_size: Nodes requested per page (``first`` variable)
        instance_label: Optional label identifying the service instance;
            sent with every request so server-side logs can be correlated
        max_pages: Optional guard against a server that never stops paging
        verify: Verify TLS certificates
    """

    endpoint: str = ""
    access_token: str = ""
    timeout: float = DEFAULT_TIMEOUT
    page_size: int = DEFAULT_PAGE_SIZE
    instance_label: Optional[str] = None
    max_pages: Optional[int] = None
    verify: bool = True

    @classmethod
    def from_env(cls, prefix: str = "SNAPTREE_") -> 'ClientConfig':
        """Build a config from environment variables.

        Reads ``<prefix>ENDPOINT``, ``TOKEN``, ``TIMEOUT``, ``PAGE_SIZE``,
        ``INSTANCE``, ``MAX_PAGES`` and ``VERIFY``. Unset variables keep their
        defaults. ``VERIFY`` accepts true/false, yes/no, on/off or 1/0.

        Raises:
            ConfigurationError: If a numeric or boolean variable cannot be parsed
        """
        env = os.environ

        def _number(name, convert, default):
            raw = env.get(prefix + name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return convert(raw)
            except ValueError as err:
                raise ConfigurationError(
                    f"{prefix}{name} must be numeric, got {raw!r}"
                ) from err

        def _flag(name, default):
            raw = env.get(prefix + name)
            if raw is None or raw.strip() == "":
                return default
            value = raw.strip().lower()
            if value in TRUE_VALUES:
                return True
            if value in FALSE_VALUES:
                return False
            raise ConfigurationError(f"{prefix}{name} must be a boolean, got {raw!r}")

        return cls(
            endpoint=env.get(prefix + "ENDPOINT", ""),
            access_token=env.get(prefix + "TOKEN", ""),
            timeout=_number("TIMEOUT", float, DEFAULT_TIMEOUT),
            page_size=_number("PAGE_SIZE", int, DEFAULT_PAGE_SIZE),
            instance_label=env.get(prefix + "INSTANCE") or None,
            max_pages=_number("MAX_PAGES", int, None),
            verify=_flag("VERIFY", True),
        )

    def headers(self) -> dict:
        """HTTP headers sent with every request."""
        headers = {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        if self.instance_label:
            headers[INSTANCE_HEADER] = self.instance_label
        return headers

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if not self.endpoint:
            errors.append("endpoint is required")
        if not self.access_token:
            errors.append("access_token is required")
        if self.timeout is not None and self.timeout <= 0:
            errors.append("timeout must be positive")
        if self.page_size < 1:
            errors.append("page_size must be at least 1")
        if self.max_pages is not None and self.max_pages < 1:
            errors.append("max_pages must be at least 1")
        return errors


@dataclass
class BrowseConfig:
    """How a snapshot browse walks the container tree.

    Attributes:
        max_depth: Container levels to discover below the root. Level-1
            containers are the root's children; containers deeper than
            this are never listed.
        include_containers: Keep container nodes in the final object list
            (by default only leaf objects are returned)
        workers: Listing calls issued concurrently within one level.
            1 means strictly sequential.
        warn_on_empty: Emit EmptyResultWarning for listings with no children.
            The traverser switches this on for the lister it is given.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    include_containers: bool = False
    workers: int = 1
    warn_on_empty: bool = False

    def validate(self) -> List[str]:
        """Validate configuration for consistency.

        Returns:
            List of validation errors (empty if valid)
        """
        errors = []
        if self.max_depth < 1:
            errors.append("max_depth must be at least 1")
        if self.workers < 1:
            errors.append("workers must be at least 1")
        return errors


def require_valid(config) -> None:
    """Raise ConfigurationError listing every problem ``config.validate()`` finds."""
    errors = config.validate()
    if errors:
        raise ConfigurationError(
            f"Invalid {type(config).__name__}: " + "; ".join(errors)
        )


def setup_logging(level: int = logging.INFO) -> None:
    """Attach a stderr handler to the package logger once.

    The library never configures logging on import; applications and
    scripts call this when they want the traversal progress on the console.
    """
    package_logger = logging.getLogger("snaptreelib")
    package_logger.setLevel(level)
    has_console = any(
        isinstance(h, logging.StreamHandler) and getattr(h, "stream", None) is sys.stderr
        for h in package_logger.handlers
    )
    if not has_console:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        package_logger.addHandler(handler)
