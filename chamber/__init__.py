"""Echo chamber: a WebSocket room where every message reaches everyone."""
