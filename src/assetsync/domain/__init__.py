"""Domain layer: entities, ports and the orchestration services built on them."""
