from ui_analytics.sinks.base import Sink, UserAwareSink
from ui_analytics.sinks.logging_sink import LoggingSink
from ui_analytics.sinks.memory import InMemorySink
from ui_analytics.sinks.redis_stream import RedisStreamSink

__all__ = ["InMemorySink", "LoggingSink", "RedisStreamSink", "Sink", "UserAwareSink"]
