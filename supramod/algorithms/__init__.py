from .quality import community_sizes, multislice_modularity

__all__ = ["community_sizes", "multislice_modularity"]
