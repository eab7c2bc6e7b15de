"""
Gateway Module for DME Intake.

Outbound integrations: the intake API gateway and its shared retry support.
"""

from dme_intake.gateways.base import (
    GatewayConfig,
    with_retry,
)
from dme_intake.gateways.intake_gateway import (
    DmeIntakeGateway,
    build_intake_payload,
    is_test_endpoint,
)

__all__ = [
    "GatewayConfig",
    "with_retry",
    "DmeIntakeGateway",
    "build_intake_payload",
    "is_test_endpoint",
]
