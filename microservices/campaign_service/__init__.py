"""
Campaign Service

Donation campaign lifecycle microservice providing:
- Campaign status state machine (pending, approved, active, processing, completed, rejected, cancelled)
- Scheduled activation, completion and expiration sweeps
- Admin status actions and one-time fundraising extension

Port: 8251
"""

__version__ = "1.0.0"
__service__ = "campaign_service"
