"""
Shared client instances — Redis.

redis.from_url does not connect until first use, so importing this module is
always safe (even when Redis is down during tests).
"""
import redis

from app.config import REDIS_URL

# ── Redis ─────────────────────────────────────────────────────────────────────
redis_client = redis.from_url(REDIS_URL, decode_responses=True)
