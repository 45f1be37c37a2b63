"""Message bus infrastructure - Redis Streams integration."""
from .redis_stream_consumer import RedisStreamOrderQueue

__all__ = ["RedisStreamOrderQueue"]
