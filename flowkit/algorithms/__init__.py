"""Graph algorithms: shared lifecycle, maximum flow and bipartite matching."""
