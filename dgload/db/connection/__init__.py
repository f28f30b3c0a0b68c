from .onto import DEFAULT_ADDRESS, MAX_MESSAGE_SIZE, DgraphConfig

__all__ = [
    "DEFAULT_ADDRESS",
    "MAX_MESSAGE_SIZE",
    "DgraphConfig",
]
