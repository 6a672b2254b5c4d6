"""Platform adapters: registry access, permission grants, processes."""
