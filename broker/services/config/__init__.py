"""Configuration package (Facade).

Re-exports the public config types so callers import from a single, stable path:

	from broker.services.config import BrokerConfig
"""

from broker.services.config.broker_config import BrokerConfig

__all__ = ["BrokerConfig"]
