"""
Client address resolution.

The API is normally deployed behind a reverse proxy (Vercel, nginx), so
request.remote_addr is the proxy, not the visitor. The helpers here pick the
best available client address from the proxy headers.
"""

from flask import request

UNKNOWN_CLIENT = 'unknown'


def get_client_ip():
    """
    Get the client IP address for the current request.

    Order of preference:
    1. The leftmost X-Forwarded-For entry (original client)
    2. X-Real-IP
    3. request.remote_addr
    4. 'unknown'

    Security Note:
        Both headers are client-controlled when the app is reachable without
        a proxy in front. Keys derived from this value are a throttling aid,
        not an identity.
    """
    forwarded_for = request.headers.get('X-Forwarded-For')
    if forwarded_for:
        # X-Forwarded-For can be: "client, proxy1, proxy2"
        client_ip = forwarded_for.split(',')[0].strip()
        if client_ip:
            return client_ip

    real_ip = request.headers.get('X-Real-IP')
    if real_ip:
        return real_ip.strip()

    return request.remote_addr or UNKNOWN_CLIENT
