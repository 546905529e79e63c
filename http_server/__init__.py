"""
Minimal asyncio HTTP/1.1 server.
"""
