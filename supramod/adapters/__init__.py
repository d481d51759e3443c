# Backend adapters are imported on demand; networkx is optional.
