from .alert_dispatcher import AlertAck, AlertDispatcher, serialize_event

__all__ = ["AlertAck", "AlertDispatcher", "serialize_event"]
