"""CLI utility functions"""

from .output import format_deploy_result, format_publish_table

__all__ = [
    'format_deploy_result',
    'format_publish_table',
]
