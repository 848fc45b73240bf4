"""
Helper Functions

Contains utility functions used throughout the application.
"""

from typing import Dict, Optional


def get_user_identity(request_obj, session_id: Optional[str] = None) -> Dict[str, Optional[str]]:
    """Extract user identity information from request."""
    user_ip = getattr(request_obj, 'remote_addr', None) or 'unknown'

    # Socket.IO requests carry the socket id
    if session_id is None:
        session_id = getattr(request_obj, 'sid', None)

    return {
        'user_ip': user_ip,
        'session_id': session_id
    }
