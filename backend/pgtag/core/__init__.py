"""
Codec and plumbing: type OIDs, inference/serialization, result decoding,
connection strings, settings and the HTTP transport.
"""
