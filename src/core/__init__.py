"""
Streaming chat core: wire decoding, rendering and the request/response cycle.
"""
