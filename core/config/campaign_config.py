#!/usr/bin/env python3
"""Campaign service main configuration

Combines all sub-configs for the campaign lifecycle service.
"""
import os
from dataclasses import dataclass, field

from .infra_config import InfraConfig
from .lifecycle_config import CampaignLifecycleConfig
from .logging_config import LoggingConfig

def _bool(val: str) -> bool:
    return val.lower() == "true"

def _int(val: str, default: int) -> int:
    try:
        return int(val) if val else default
    except ValueError:
        return default


@dataclass
class CampaignConfig:
    """Main campaign service configuration with all sub-configs"""

    # Environment
    environment: str = "development"
    debug: bool = False

    # Service settings
    service_name: str = "campaign_service"
    service_host: str = "0.0.0.0"
    service_port: int = 8251

    # Sub-configurations
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    infrastructure: InfraConfig = field(default_factory=InfraConfig)
    lifecycle: CampaignLifecycleConfig = field(default_factory=CampaignLifecycleConfig)

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> 'CampaignConfig':
        """Load complete configuration from environment"""
        env = os.getenv("ENV") or os.getenv("ENVIRONMENT", "development")
        return cls(
            environment=env,
            debug=_bool(os.getenv("DEBUG", "false")),
            service_name=os.getenv("SERVICE_NAME", "campaign_service"),
            service_host=os.getenv("SERVICE_HOST", "0.0.0.0"),
            service_port=_int(os.getenv("SERVICE_PORT", "8251"), 8251),
            logging=LoggingConfig.from_env(),
            infrastructure=InfraConfig.from_env(),
            lifecycle=CampaignLifecycleConfig.from_env(),
        )
