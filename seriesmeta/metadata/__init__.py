"""
Metadata providers and the canonical metadata shapes they produce.

New external catalog sources should live under `seriesmeta.metadata.providers`
and implement `seriesmeta.metadata.provider.MetadataProvider`.
"""
