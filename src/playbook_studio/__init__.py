"""Playbook Studio - workflow and playbook management service and client"""

__version__ = "1.0.0"
