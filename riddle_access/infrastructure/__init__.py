"""
Infrastructure Layer

Concrete riddle sources, the shard store, and component wiring.
"""
