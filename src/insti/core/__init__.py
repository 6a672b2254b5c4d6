"""Core domain: manifests, archives, resource operations and engines.

Submodules are imported explicitly (``insti.core.engine``,
``insti.core.manifest``...); this package itself exports nothing so the
platform adapters can depend on ``insti.core.regfile`` without cycles.
"""
